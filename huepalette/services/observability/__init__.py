"""
Observability module for the palette extraction pipeline.

Provides performance monitoring, stage logging and memory tracking.
"""

from .metrics import (
    PerformanceMetrics,
    PaletteExtractionMetrics,
    MetricsCollector,
    PaletteExtractionLogger,
    get_metrics_collector,
    get_extraction_logger,
    performance_monitor,
    performance_tracked,
    log_memory_usage,
    force_garbage_collection
)

__all__ = [
    'PerformanceMetrics',
    'PaletteExtractionMetrics',
    'MetricsCollector',
    'PaletteExtractionLogger',
    'get_metrics_collector',
    'get_extraction_logger',
    'performance_monitor',
    'performance_tracked',
    'log_memory_usage',
    'force_garbage_collection'
]
