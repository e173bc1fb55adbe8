"""Metric snapshot model and OpenMetrics text exposition"""
from .models import (
    ClassicHistogramBuckets,
    ClassicHistogramData,
    ClassicHistogramSnapshot,
    CounterData,
    CounterSnapshot,
    Exemplar,
    Exemplars,
    GaugeData,
    GaugeSnapshot,
    InfoData,
    InfoSnapshot,
    Labels,
    MetricMetadata,
    MetricType,
    NativeHistogramData,
    NativeHistogramSnapshot,
    Quantile,
    StateSetData,
    StateSetSnapshot,
    SummaryData,
    SummarySnapshot,
    UnknownData,
    UnknownSnapshot,
)

__all__ = [
    'ClassicHistogramBuckets',
    'ClassicHistogramData',
    'ClassicHistogramSnapshot',
    'CounterData',
    'CounterSnapshot',
    'Exemplar',
    'Exemplars',
    'GaugeData',
    'GaugeSnapshot',
    'InfoData',
    'InfoSnapshot',
    'Labels',
    'MetricMetadata',
    'MetricType',
    'NativeHistogramData',
    'NativeHistogramSnapshot',
    'Quantile',
    'StateSetData',
    'StateSetSnapshot',
    'SummaryData',
    'SummarySnapshot',
    'UnknownData',
    'UnknownSnapshot',
]
