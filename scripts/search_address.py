#!/usr/bin/env python3
"""
Run a POI search against a running API server and print a summary
"""
import argparse
import json
import sys

import requests

CATEGORY_FLAGS = ("worship", "schools", "parks", "daycare")


def make_search_request(address, radius_m, categories, base_url="http://localhost:8000"):
    """
    Call the /search endpoint.

    Args:
        address: Address string
        radius_m: Search radius in metres
        categories: Iterable of enabled category flags
        base_url: Base URL of the API server

    Returns:
        Decoded response, or None on failure
    """
    params = {"address": address, "radius_m": radius_m}
    for flag in CATEGORY_FLAGS:
        params[flag] = "true" if flag in categories else "false"

    try:
        response = requests.get(f"{base_url}/search", params=params, timeout=120)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        print(f"Error searching {address}: {e}")
        if getattr(e, "response", None) is not None:
            print(f"Response status: {e.response.status_code}")
            print(f"Response body: {e.response.text}")
        return None


def print_summary(result):
    center = result["center"]
    print(f"Center: {center['label']} ({center['lat']}, {center['lon']})")
    print(f"Radius: {result['radius_m']} m")
    print("-" * 60)
    for category, count in result["counts"].items():
        label = result["styles"][category]["label"]
        print(f"{label:<20} {count}")
    print("-" * 60)
    for poi in result["pois"]:
        print(f"[{poi['category_label']}] {poi['name']}")
        for line in poi["details"]:
            print(f"    {line}")


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("address")
    parser.add_argument("--radius-m", type=int, default=1609)
    parser.add_argument("--categories", default=",".join(CATEGORY_FLAGS),
                        help="Comma separated subset of: " + ", ".join(CATEGORY_FLAGS))
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--json", action="store_true", help="Print the raw response")
    args = parser.parse_args(argv)

    categories = {c.strip() for c in args.categories.split(",") if c.strip()}
    unknown = categories - set(CATEGORY_FLAGS)
    if unknown:
        parser.error(f"unknown categories: {', '.join(sorted(unknown))}")

    result = make_search_request(args.address, args.radius_m, categories, args.base_url)
    if result is None:
        return 1
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
