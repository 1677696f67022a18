"""
palettekit Metrics Collection
In-process counters and timings for palette generation.
"""
import time
from collections import defaultdict, Counter
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from threading import Lock

import psutil
from loguru import logger

from palettekit.config import config


class MetricsCollector:
    """Simple in-process metrics collector."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._peak_memory_mb: float = 0.0
        self._start_time = time.time()

    def increment(self, name: str, amount: int = 1):
        """Increment a named counter."""
        if not self.enabled:
            return
        with self._lock:
            self._counters[name] += amount

    def increment_generated(self):
        """Count a successfully generated palette."""
        self.increment("palettes_generated_total")

    def increment_failure(self, error_type: str):
        """Count a failed generation by error type."""
        self.increment(f"palettes_failed_total_{error_type}")

    def record_timing(self, operation: str, duration_ms: float):
        """Record timing for an operation."""
        if not self.enabled:
            return
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def record_memory(self, memory_mb: float):
        """Track the peak resident memory seen while generating."""
        if not self.enabled:
            return
        with self._lock:
            self._peak_memory_mb = max(self._peak_memory_mb, memory_mb)

    def get_counters(self) -> Dict[str, int]:
        """Get current counter values."""
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Get timing statistics."""
        with self._lock:
            stats = {}
            for operation, timings in self._timings.items():
                if timings:
                    stats[operation] = {
                        "count": len(timings),
                        "mean": sum(timings) / len(timings),
                        "min": min(timings),
                        "max": max(timings),
                        "p50": self._percentile(timings, 50),
                        "p95": self._percentile(timings, 95)
                    }
            return stats

    def get_uptime_seconds(self) -> float:
        """Get collector uptime in seconds."""
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "peak_memory_mb": self._peak_memory_mb
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._peak_memory_mb = 0.0
            self._start_time = time.time()

    @staticmethod
    def _percentile(data: List[float], percentile: int) -> float:
        """Calculate percentile of data."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        k = (len(sorted_data) - 1) * percentile / 100
        f = int(k)
        c = k - f

        if f + 1 < len(sorted_data):
            return sorted_data[f] + c * (sorted_data[f + 1] - sorted_data[f])
        else:
            return sorted_data[f]


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(enabled=config.METRICS_ENABLED)
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    if _metrics is not None:
        _metrics.reset()


@contextmanager
def performance_monitor(operation_name: str, **context):
    """Time a block and record it under ``<operation_name>_duration_ms``."""
    metrics = get_metrics()
    start_time = time.time()
    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.time() - start_time) * 1000
        metrics.record_timing(operation_name, duration_ms)
        if metrics.enabled:
            metrics.record_memory(psutil.Process().memory_info().rss / 1024 / 1024)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {duration_ms:.1f}ms: {error_msg}")
        else:
            logger.debug(f"Operation {operation_name} completed in {duration_ms:.1f}ms {context or ''}")
