"""
Performance monitoring for draft engine operations
"""
import functools
import json
import logging
import os
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import psutil

from config import DATA_DIR


logger = logging.getLogger(__name__)

# Scoring a pick should be instant; anything slower is worth a warning
SLOW_OPERATION_SECONDS = 1.0

# Operations kept in memory; older ones are dropped
MAX_METRICS = 1000
HISTORY_FILE = "history.json"


@dataclass
class OperationMetric:
    """One timed engine operation"""
    name: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    memory_mb: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self, success: bool = True, error: Optional[str] = None):
        """Mark this metric as complete"""
        self.end_time = time.time()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error


class PerformanceMonitor:
    """Times engine operations and samples process memory"""

    def __init__(self, metrics_dir: Optional[Path] = None, max_metrics: int = MAX_METRICS):
        self.metrics: List[OperationMetric] = []
        self.max_metrics = max_metrics
        self._lock = threading.Lock()
        self._process = psutil.Process(os.getpid())
        self.metrics_dir = metrics_dir or DATA_DIR / "metrics"

    @property
    def history_file(self) -> Path:
        return self.metrics_dir / HISTORY_FILE

    @contextmanager
    def measure(self, name: str, **metadata):
        """Context manager to measure execution time"""
        metric = OperationMetric(
            name=name,
            start_time=time.time(),
            memory_mb=self._memory_mb(),
            metadata=metadata
        )

        try:
            yield metric
            metric.complete(success=True)
        except Exception as e:
            metric.complete(success=False, error=str(e))
            raise
        finally:
            with self._lock:
                self.metrics.append(metric)

                # Keep only the most recent operations
                if len(self.metrics) > self.max_metrics:
                    self.metrics = self.metrics[-self.max_metrics:]

            if metric.duration and metric.duration > SLOW_OPERATION_SECONDS:
                logger.warning(f"Slow operation: {name} took {metric.duration:.2f}s")

    def measure_function(self, func: Optional[Callable] = None, name: Optional[str] = None):
        """Decorator to measure function execution time"""
        def decorator(f):
            metric_name = name or f"{f.__module__}.{f.__name__}"

            @functools.wraps(f)
            def wrapper(*args, **kwargs):
                with self.measure(metric_name):
                    return f(*args, **kwargs)

            return wrapper

        if func:
            return decorator(func)
        return decorator

    def _memory_mb(self) -> float:
        try:
            return self._process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.debug(f"Error reading process memory: {e}")
            return 0.0

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get per-operation statistics"""
        with self._lock:
            if not self.metrics:
                return {"message": "No metrics recorded"}

            by_name: Dict[str, List[OperationMetric]] = {}
            for metric in self.metrics:
                by_name.setdefault(metric.name, []).append(metric)

            summary = {}
            for name, metrics_list in by_name.items():
                durations = [m.duration for m in metrics_list if m.duration is not None]
                success_count = sum(1 for m in metrics_list if m.success)

                if durations:
                    summary[name] = {
                        'count': len(metrics_list),
                        'success_count': success_count,
                        'error_count': len(metrics_list) - success_count,
                        'avg_duration': sum(durations) / len(durations),
                        'max_duration': max(durations),
                        'max_memory_mb': max(m.memory_mb for m in metrics_list)
                    }

            return summary

    def export_metrics(self, filename: Optional[str] = None) -> Path:
        """Export metrics to a JSON file"""
        if not filename:
            filename = f"metrics_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

        self.metrics_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.metrics_dir / filename

        with self._lock:
            records = [_to_record(m) for m in self.metrics]

        data = {
            'timestamp': datetime.now().isoformat(),
            'operations': records,
            'summary': self.get_performance_summary()
        }

        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2, default=str)

        logger.info(f"Exported metrics to {filepath}")
        return filepath

    def load_history(self) -> int:
        """Replace the retained operations with those saved by earlier runs; returns how many"""
        if not self.history_file.exists():
            return 0

        try:
            with open(self.history_file) as f:
                records = json.load(f).get('operations', [])
            loaded = [
                OperationMetric(
                    name=r['name'],
                    start_time=r.get('start_time', 0.0),
                    duration=r.get('duration'),
                    success=r.get('success', True),
                    error=r.get('error'),
                    memory_mb=r.get('memory_mb', 0.0),
                    metadata=r.get('metadata', {})
                )
                for r in records
            ]
        except (OSError, ValueError, KeyError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable metrics history {self.history_file}: {e}")
            return 0

        with self._lock:
            self.metrics = loaded[-self.max_metrics:]
        return len(loaded)

    def save_history(self) -> Path:
        """Write the retained operations so later runs can report them"""
        self.metrics_dir.mkdir(parents=True, exist_ok=True)

        with self._lock:
            records = [_to_record(m) for m in self.metrics]

        with open(self.history_file, 'w') as f:
            json.dump({'operations': records}, f, default=str)

        logger.debug(f"Saved {len(records)} operations to {self.history_file}")
        return self.history_file

    def clear_metrics(self):
        """Clear all recorded metrics"""
        with self._lock:
            self.metrics.clear()


def _to_record(metric: OperationMetric) -> Dict[str, Any]:
    return {
        'name': metric.name,
        'start_time': metric.start_time,
        'duration': metric.duration,
        'success': metric.success,
        'error': metric.error,
        'memory_mb': metric.memory_mb,
        'metadata': metric.metadata
    }


# Metrics only; engine state is never shared through this instance
monitor = PerformanceMonitor()


def measure_performance(name: Optional[str] = None):
    """Decorator to measure function performance"""
    return monitor.measure_function(name=name)
