"""
Observability metrics collection for the palette extraction pipeline.

Provides performance metrics, per-extraction stage logging and memory
monitoring for palette extraction calls.
"""

import time
import psutil
import gc
from typing import Dict, Any, Optional, List
from functools import wraps
from dataclasses import dataclass, asdict, field
from contextlib import contextmanager
import threading
from collections import defaultdict, deque
import numpy as np
from loguru import logger

from huepalette.config import config


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single pipeline operation."""
    operation_name: str
    duration_ms: float
    memory_usage_mb: float
    cpu_percent: float
    pixel_count: int
    color_count: int
    timestamp: float
    error: Optional[str] = None


@dataclass
class PaletteExtractionMetrics:
    """Summary metrics for one palette extraction."""
    total_duration_ms: float
    resize_duration_ms: float
    edge_selection_duration_ms: float
    palette_selection_duration_ms: float

    input_image_size: tuple
    analyzed_image_size: tuple

    edge_color_count: int
    unique_color_count: int
    fallback_slots: int

    memory_peak_mb: float
    warnings: List[str] = field(default_factory=list)


class MetricsCollector:
    """Thread-safe metrics collector for pipeline operations."""

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self._lock = threading.Lock()
        self._metrics_history: deque = deque(maxlen=max_history)
        self._operation_counts = defaultdict(int)
        self._error_counts = defaultdict(int)
        self._performance_stats = defaultdict(list)

    def record_performance(self, metrics: PerformanceMetrics) -> None:
        """Record performance metrics for an operation."""
        with self._lock:
            self._metrics_history.append(metrics)
            self._operation_counts[metrics.operation_name] += 1

            if metrics.error:
                self._error_counts[metrics.operation_name] += 1

            self._performance_stats[metrics.operation_name].append({
                'duration_ms': metrics.duration_ms,
                'memory_mb': metrics.memory_usage_mb,
                'cpu_percent': metrics.cpu_percent
            })

            # Keep only recent stats to prevent memory growth
            if len(self._performance_stats[metrics.operation_name]) > 100:
                self._performance_stats[metrics.operation_name].pop(0)

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """Get aggregated statistics for a specific operation."""
        with self._lock:
            return self._operation_stats_locked(operation_name)

    def _operation_stats_locked(self, operation_name: str) -> Dict[str, Any]:
        stats = self._performance_stats.get(operation_name)
        if not stats:
            return {}

        durations = [s['duration_ms'] for s in stats]
        memory_usage = [s['memory_mb'] for s in stats]
        cpu_usage = [s['cpu_percent'] for s in stats]

        return {
            'operation_name': operation_name,
            'total_calls': self._operation_counts[operation_name],
            'error_count': self._error_counts[operation_name],
            'error_rate': self._error_counts[operation_name] / max(1, self._operation_counts[operation_name]),
            'duration_stats': {
                'mean_ms': float(np.mean(durations)),
                'median_ms': float(np.median(durations)),
                'p95_ms': float(np.percentile(durations, 95)),
                'p99_ms': float(np.percentile(durations, 99)),
                'min_ms': float(np.min(durations)),
                'max_ms': float(np.max(durations))
            },
            'memory_stats': {
                'mean_mb': float(np.mean(memory_usage)),
                'peak_mb': float(np.max(memory_usage))
            },
            'cpu_stats': {
                'mean_percent': float(np.mean(cpu_usage)),
                'peak_percent': float(np.max(cpu_usage))
            }
        }

    def get_all_stats(self) -> Dict[str, Any]:
        """Get aggregated statistics for all operations."""
        with self._lock:
            all_stats = {
                name: self._operation_stats_locked(name)
                for name in self._operation_counts.keys()
            }
            total_ops = sum(self._operation_counts.values())
            total_errors = sum(self._error_counts.values())

            return {
                'operations': all_stats,
                'total_operations': total_ops,
                'total_errors': total_errors,
                'overall_error_rate': total_errors / max(1, total_ops)
            }

    def get_recent_metrics(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get the most recent performance metrics."""
        with self._lock:
            recent = list(self._metrics_history)[-limit:]
            return [asdict(metric) for metric in recent]

    def reset(self) -> None:
        with self._lock:
            self._metrics_history.clear()
            self._operation_counts.clear()
            self._error_counts.clear()
            self._performance_stats.clear()


# Global metrics collector instance
_metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    return _metrics_collector


@contextmanager
def performance_monitor(operation_name: str, pixel_count: int = 0, color_count: int = 0):
    """Context manager for monitoring performance of operations."""
    start_time = time.time()
    start_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB
    start_cpu = psutil.cpu_percent()

    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        end_time = time.time()
        end_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB
        end_cpu = psutil.cpu_percent()

        metrics = PerformanceMetrics(
            operation_name=operation_name,
            duration_ms=(end_time - start_time) * 1000,
            memory_usage_mb=max(end_memory, start_memory),
            cpu_percent=max(end_cpu, start_cpu),
            pixel_count=pixel_count,
            color_count=color_count,
            timestamp=end_time,
            error=error_msg
        )

        if config.METRICS_ENABLED:
            _metrics_collector.record_performance(metrics)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {metrics.duration_ms:.1f}ms: {error_msg}")
        else:
            logger.debug(f"Operation {operation_name} completed in {metrics.duration_ms:.1f}ms "
                         f"(memory: {metrics.memory_usage_mb:.1f}MB, CPU: {metrics.cpu_percent:.1f}%)")


def performance_tracked(operation_name: str):
    """Decorator for automatically tracking function performance."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            pixel_count = 0

            # First argument shaped like an image sets the pixel count
            for arg in args:
                shape = getattr(arg, 'shape', None)
                if shape is not None and len(shape) >= 2:
                    pixel_count = shape[0] * shape[1]
                    break

            with performance_monitor(operation_name, pixel_count):
                return func(*args, **kwargs)
        return wrapper
    return decorator


class PaletteExtractionLogger:
    """Stage logger for palette extraction calls."""

    def __init__(self):
        self._lock = threading.Lock()
        self._extractions: Dict[str, Dict[str, Any]] = {}
        self._extraction_id_counter = 0

    def start_extraction(self, image_size: tuple) -> str:
        """Start logging a new palette extraction."""
        with self._lock:
            self._extraction_id_counter += 1
            extraction_id = f"extraction_{self._extraction_id_counter}"

            self._extractions[extraction_id] = {
                'id': extraction_id,
                'start_time': time.time(),
                'image_size': image_size,
                'warnings': [],
                'stages': {}
            }

        logger.debug(f"Starting palette extraction {extraction_id} (image: {image_size})")

        return extraction_id

    def log_stage(self, extraction_id: str, stage_name: str, duration_ms: float, **kwargs):
        """Log completion of an extraction stage."""
        extraction = self._extractions.get(extraction_id)
        if extraction is None:
            return

        extraction['stages'][stage_name] = {
            'duration_ms': duration_ms,
            'timestamp': time.time(),
            **kwargs
        }

        logger.debug(f"Extraction {extraction_id} - {stage_name} completed in {duration_ms:.1f}ms")

    def log_warning(self, extraction_id: str, message: str):
        """Log a warning for an extraction."""
        extraction = self._extractions.get(extraction_id)
        if extraction is not None:
            extraction['warnings'].append(message)
        logger.warning(f"Palette extraction warning: {message}")

    def finish_extraction(self, extraction_id: str, fallback_slots: int) -> PaletteExtractionMetrics:
        """Finish logging and return summary metrics."""
        with self._lock:
            extraction = self._extractions.pop(extraction_id, None)

        if extraction is None:
            raise ValueError(f"No active extraction {extraction_id}")

        total_duration = (time.time() - extraction['start_time']) * 1000
        stages = extraction['stages']

        metrics = PaletteExtractionMetrics(
            total_duration_ms=total_duration,
            resize_duration_ms=stages.get('resize', {}).get('duration_ms', 0),
            edge_selection_duration_ms=stages.get('edge_selection', {}).get('duration_ms', 0),
            palette_selection_duration_ms=stages.get('palette_selection', {}).get('duration_ms', 0),

            input_image_size=extraction['image_size'],
            analyzed_image_size=stages.get('resize', {}).get('size', extraction['image_size']),

            edge_color_count=stages.get('edge_selection', {}).get('color_count', 0),
            unique_color_count=stages.get('palette_selection', {}).get('color_count', 0),
            fallback_slots=fallback_slots,

            memory_peak_mb=stages.get('buffer_release', {}).get('memory_mb', 0),
            warnings=extraction['warnings']
        )

        logger.info(f"Extraction {extraction_id} completed in {total_duration:.1f}ms "
                    f"({metrics.unique_color_count} colors, {fallback_slots} fallback slots)")

        if metrics.warnings:
            logger.warning(f"Extraction completed with {len(metrics.warnings)} warnings")

        return metrics

    def abandon_extraction(self, extraction_id: str) -> None:
        """Drop state for an extraction that failed."""
        with self._lock:
            self._extractions.pop(extraction_id, None)


# Global extraction logger instance
_extraction_logger = PaletteExtractionLogger()


def get_extraction_logger() -> PaletteExtractionLogger:
    """Get the global extraction logger instance."""
    return _extraction_logger


def log_memory_usage(stage_name: str):
    """Log current memory usage for a specific stage."""
    process = psutil.Process()
    memory_mb = process.memory_info().rss / 1024 / 1024
    cpu_percent = process.cpu_percent()

    logger.debug(f"Memory usage at {stage_name}: {memory_mb:.1f}MB (CPU: {cpu_percent:.1f}%)")

    return {
        'stage': stage_name,
        'memory_mb': memory_mb,
        'cpu_percent': cpu_percent,
        'timestamp': time.time()
    }


def force_garbage_collection():
    """Force garbage collection and log memory recovery."""
    before_mb = psutil.Process().memory_info().rss / 1024 / 1024
    collected = gc.collect()
    after_mb = psutil.Process().memory_info().rss / 1024 / 1024

    freed_mb = before_mb - after_mb

    if freed_mb > 1:  # Only log if significant memory was freed
        logger.debug(f"Garbage collection freed {freed_mb:.1f}MB "
                     f"(collected {collected} objects)")

    return {
        'before_mb': before_mb,
        'after_mb': after_mb,
        'freed_mb': freed_mb,
        'objects_collected': collected
    }
