"""OpenMetrics text exposition writers"""
from .openmetrics import CONTENT_TYPE, OpenMetricsTextFormatWriter, generate_latest
from .textfile import TextfileExporter

__all__ = [
    'CONTENT_TYPE',
    'OpenMetricsTextFormatWriter',
    'generate_latest',
    'TextfileExporter',
]
