# ============================================================================
# src/medicine_resolver/utils/metrics.py
# ============================================================================
"""
Performance metrics tracking for the medicine resolver.
"""

import threading
import time
from typing import Deque, Dict, Optional, Any
from collections import defaultdict, deque
import statistics

# Samples kept per timer; older ones are dropped
MAX_TIMER_SAMPLES = 10_000


class MetricsCollector:
    """Collect and aggregate counters and timings."""

    def __init__(self, max_samples: int = MAX_TIMER_SAMPLES):
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = defaultdict(int)
        self._timers: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=max_samples))

    def increment(self, name: str, value: int = 1) -> None:
        """
        Increment counter.

        Args:
            name: Counter name
            value: Increment amount
        """
        with self._lock:
            self._counters[name] += value

    def record_time(self, name: str, duration: float) -> None:
        """
        Record operation duration.

        Args:
            name: Operation name
            duration: Duration in seconds
        """
        with self._lock:
            self._timers[name].append(duration)

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def get_timer_stats(self, name: str) -> Optional[Dict[str, float]]:
        """
        Get timer statistics over the retained samples.

        Returns:
            Dict with count, min, max, mean, median, p95
        """
        with self._lock:
            values = list(self._timers.get(name, []))
        if not values:
            return None

        sorted_values = sorted(values)
        count = len(values)

        return {
            'count': count,
            'min': sorted_values[0],
            'max': sorted_values[-1],
            'mean': statistics.mean(values),
            'median': statistics.median(values),
            'p95': sorted_values[min(int(count * 0.95), count - 1)],
        }

    def get_all_metrics(self) -> Dict[str, Any]:
        """Get all metrics."""
        with self._lock:
            counters = dict(self._counters)
            timer_names = list(self._timers.keys())
        return {
            'counters': counters,
            'timers': {name: self.get_timer_stats(name) for name in timer_names}
        }

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._counters.clear()
            self._timers.clear()


class Timer:
    """Context manager for timing operations."""

    def __init__(self, collector: Optional[MetricsCollector], operation: str):
        self.collector = collector
        self.operation = operation
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        if self.collector is not None:
            self.collector.record_time(self.operation, self.duration)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed milliseconds, live while the timer is still running."""
        if self.duration is not None:
            return round(self.duration * 1000, 2)
        if self.start_time is None:
            return 0.0
        return round((time.perf_counter() - self.start_time) * 1000, 2)


# Global metrics instance
_global_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    """Get global metrics collector."""
    return _global_metrics
