"""Conversion of native (exponential-bucket) histograms to classic histograms"""
import math
from typing import List, Tuple

from .models import (
    ClassicHistogramBuckets,
    ClassicHistogramData,
    ClassicHistogramSnapshot,
    NativeHistogramData,
    NativeHistogramSnapshot,
)


def bucket_upper_bound(schema: int, index: int) -> float:
    """Upper bound of positive bucket ``index``, i.e. base ** index with base = 2 ** (2 ** -schema)"""
    return 2.0 ** (index * 2.0 ** -schema)


def native_buckets_to_classic(data: NativeHistogramData) -> ClassicHistogramBuckets:
    """Map sparse native buckets to ascending classic buckets ending with +Inf.

    The +Inf bucket takes whatever is left so that its cumulative count
    equals the native histogram's total count.
    """
    buckets: List[Tuple[float, int]] = []

    for index in sorted(data.negative_buckets, reverse=True):
        buckets.append((-bucket_upper_bound(data.schema, index - 1), data.negative_buckets[index]))

    if data.zero_count > 0:
        buckets.append((data.zero_threshold, data.zero_count))

    for index in sorted(data.positive_buckets):
        buckets.append((bucket_upper_bound(data.schema, index), data.positive_buckets[index]))

    observed = sum(count for _, count in buckets)
    total = data.count if data.count is not None else observed
    buckets.append((math.inf, max(total - observed, 0)))

    return ClassicHistogramBuckets.of(
        [upper_bound for upper_bound, _ in buckets],
        [count for _, count in buckets],
    )


def native_to_classic_data(data: NativeHistogramData) -> ClassicHistogramData:
    """Convert a single native histogram data point"""
    return ClassicHistogramData(
        buckets=native_buckets_to_classic(data),
        labels=data.labels,
        count=data.count,
        sum=data.sum,
        exemplars=data.exemplars,
        created_timestamp_millis=data.created_timestamp_millis,
        scrape_timestamp_millis=data.scrape_timestamp_millis,
    )


def native_to_classic(snapshot: NativeHistogramSnapshot) -> ClassicHistogramSnapshot:
    """Convert a native histogram family to an equivalent classic histogram family"""
    return ClassicHistogramSnapshot(
        metadata=snapshot.metadata,
        data=[native_to_classic_data(data) for data in snapshot.data],
        gauge_histogram=snapshot.gauge_histogram,
    )
