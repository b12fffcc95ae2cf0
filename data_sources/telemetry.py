"""
Telemetry and Analytics System
Tracks search volume, per-category result counts and error rates
"""

import time
import threading
from typing import Dict, List, Any
from collections import Counter
from dataclasses import dataclass, field


@dataclass
class SearchMetrics:
    """Metrics for a single completed search."""
    timestamp: float
    address: str
    lat: float
    lon: float
    radius_m: float
    response_time: float
    raw_element_count: int
    point_count: int
    category_counts: Dict[str, int] = field(default_factory=dict)


class TelemetryCollector:
    """Collects and summarizes in-process telemetry for searches."""

    def __init__(self, max_requests: int = 10000):
        self.max_requests = max_requests
        self.requests: List[SearchMetrics] = []
        self.lock = threading.Lock()
        self.start_time = time.time()

        self.total_requests = 0
        self.errors: Counter = Counter()

    def record_request(self, metrics: SearchMetrics) -> None:
        """Record metrics for a completed search."""
        with self.lock:
            self.requests.append(metrics)
            self.total_requests += 1

            if len(self.requests) > self.max_requests:
                self.requests = self.requests[-self.max_requests:]

    def record_error(self, error_type: str, address: str) -> None:
        """Record a failed search."""
        with self.lock:
            self.total_requests += 1
            self.errors[error_type] += 1

    def get_overall_stats(self) -> Dict[str, Any]:
        """Get overall system statistics."""
        with self.lock:
            error_count = sum(self.errors.values())
            stats: Dict[str, Any] = {
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "total_requests": self.total_requests,
                "error_count": error_count,
                "error_rate": round(error_count / self.total_requests * 100, 2) if self.total_requests else 0.0,
                "errors_by_type": dict(self.errors),
            }
            if not self.requests:
                return stats

            n = len(self.requests)
            category_totals: Counter = Counter()
            for r in self.requests:
                category_totals.update(r.category_counts)

            stats.update({
                "avg_response_time": round(sum(r.response_time for r in self.requests) / n, 3),
                "avg_points_per_search": round(sum(r.point_count for r in self.requests) / n, 2),
                "avg_raw_elements_per_search": round(sum(r.raw_element_count for r in self.requests) / n, 2),
                "category_totals": dict(category_totals),
                "radius_distribution": dict(Counter(str(int(r.radius_m)) for r in self.requests)),
            })
            return stats

    def reset(self) -> None:
        with self.lock:
            self.requests = []
            self.total_requests = 0
            self.errors = Counter()
            self.start_time = time.time()


# Global telemetry collector instance
telemetry_collector = TelemetryCollector()


def record_search_metrics(address: str, lat: float, lon: float, radius_m: float,
                          raw_element_count: int, category_counts: Dict[str, int],
                          response_time: float) -> None:
    """Record metrics for a successful search."""
    telemetry_collector.record_request(SearchMetrics(
        timestamp=time.time(),
        address=address,
        lat=lat,
        lon=lon,
        radius_m=radius_m,
        response_time=response_time,
        raw_element_count=raw_element_count,
        point_count=sum(category_counts.values()),
        category_counts=dict(category_counts),
    ))


def record_error(error_type: str, address: str) -> None:
    """Record an error occurrence."""
    telemetry_collector.record_error(error_type, address)


def get_telemetry_stats() -> Dict[str, Any]:
    """Get current telemetry statistics."""
    return telemetry_collector.get_overall_stats()
