"""Metric snapshot data models"""
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterator, Mapping, Optional, Sequence, Tuple


class MetricType(Enum):
    """OpenMetrics metric types, valued by their # TYPE keyword"""
    UNKNOWN = "unknown"
    GAUGE = "gauge"
    COUNTER = "counter"
    STATESET = "stateset"
    INFO = "info"
    HISTOGRAM = "histogram"
    GAUGE_HISTOGRAM = "gaugehistogram"
    SUMMARY = "summary"


@dataclass(frozen=True)
class Labels:
    """Ordered label name/value pairs"""
    pairs: Tuple[Tuple[str, str], ...] = ()

    EMPTY: ClassVar["Labels"]

    @classmethod
    def of(cls, *names_and_values: str) -> "Labels":
        """Build labels from alternating names and values"""
        if len(names_and_values) % 2 != 0:
            raise ValueError("Labels.of() expects an even number of arguments")
        it = iter(names_and_values)
        return cls(tuple(zip(it, it)))

    @classmethod
    def from_dict(cls, labels: Mapping[str, str]) -> "Labels":
        """Build labels from a mapping, keeping its iteration order"""
        return cls(tuple((name, str(value)) for name, value in labels.items()))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.pairs)

    @property
    def values(self) -> Tuple[str, ...]:
        return tuple(value for _, value in self.pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


Labels.EMPTY = Labels()


@dataclass(frozen=True)
class Exemplar:
    """A single sampled observation attached to a sample line"""
    value: float
    labels: Labels = Labels.EMPTY
    timestamp_millis: Optional[int] = None

    def has_timestamp(self) -> bool:
        return self.timestamp_millis is not None


@dataclass(frozen=True)
class Exemplars:
    """Immutable collection of exemplars.

    Histograms look exemplars up by bucket range, summaries address them by index.
    """
    exemplars: Tuple[Exemplar, ...] = ()

    EMPTY: ClassVar["Exemplars"]

    @classmethod
    def of(cls, *exemplars: Exemplar) -> "Exemplars":
        return cls(tuple(exemplars))

    def get(self, lower_bound: float, upper_bound: float) -> Optional[Exemplar]:
        """Return the first exemplar with lower_bound < value <= upper_bound.

        When several exemplars fall into the range, insertion order decides,
        not timestamps; producers that want the newest one should put it first.
        """
        for exemplar in self.exemplars:
            if lower_bound < exemplar.value <= upper_bound:
                return exemplar
        return None

    def __getitem__(self, index: int) -> Exemplar:
        return self.exemplars[index]

    def __iter__(self) -> Iterator[Exemplar]:
        return iter(self.exemplars)

    def __len__(self) -> int:
        return len(self.exemplars)


Exemplars.EMPTY = Exemplars()


@dataclass(frozen=True)
class MetricMetadata:
    """Family name, help text and unit"""
    name: str
    help: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class Quantile:
    quantile: float
    value: float


@dataclass(frozen=True)
class ClassicHistogramBuckets:
    """Ascending bucket upper bounds with non-cumulative per-bucket counts"""
    upper_bounds: Tuple[float, ...]
    counts: Tuple[int, ...]

    def __post_init__(self):
        if len(self.upper_bounds) != len(self.counts):
            raise ValueError("upper_bounds and counts must have the same length")

    @classmethod
    def of(cls, upper_bounds: Sequence[float], counts: Sequence[int]) -> "ClassicHistogramBuckets":
        return cls(tuple(float(b) for b in upper_bounds), tuple(int(c) for c in counts))

    def get_upper_bound(self, index: int) -> float:
        return self.upper_bounds[index]

    def get_count(self, index: int) -> int:
        return self.counts[index]

    def __len__(self) -> int:
        return len(self.upper_bounds)


# Data points. Timestamps are milliseconds since the epoch; None means absent.

@dataclass(frozen=True)
class CounterData:
    value: float
    labels: Labels = Labels.EMPTY
    exemplar: Optional[Exemplar] = None
    created_timestamp_millis: Optional[int] = None
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class GaugeData:
    value: float
    labels: Labels = Labels.EMPTY
    exemplar: Optional[Exemplar] = None
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class UnknownData:
    value: float
    labels: Labels = Labels.EMPTY
    exemplar: Optional[Exemplar] = None
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class InfoData:
    labels: Labels = Labels.EMPTY
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class StateSetData:
    """Ordered (state name, is active) pairs for one label set"""
    states: Tuple[Tuple[str, bool], ...]
    labels: Labels = Labels.EMPTY
    scrape_timestamp_millis: Optional[int] = None

    def __len__(self) -> int:
        return len(self.states)


@dataclass(frozen=True)
class ClassicHistogramData:
    buckets: ClassicHistogramBuckets
    labels: Labels = Labels.EMPTY
    count: Optional[int] = None
    sum: Optional[float] = None
    exemplars: Exemplars = Exemplars.EMPTY
    created_timestamp_millis: Optional[int] = None
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class NativeHistogramData:
    """Sparse exponential-bucket histogram.

    Bucket mappings go from bucket index to non-cumulative count. With
    base = 2 ** (2 ** -schema), positive bucket i covers (base**(i-1), base**i]
    and negative bucket i covers [-base**i, -base**(i-1)).
    """
    schema: int
    zero_threshold: float = 0.0
    zero_count: int = 0
    positive_buckets: Dict[int, int] = field(default_factory=dict, hash=False)
    negative_buckets: Dict[int, int] = field(default_factory=dict, hash=False)
    labels: Labels = Labels.EMPTY
    count: Optional[int] = None
    sum: Optional[float] = None
    exemplars: Exemplars = Exemplars.EMPTY
    created_timestamp_millis: Optional[int] = None
    scrape_timestamp_millis: Optional[int] = None


@dataclass(frozen=True)
class SummaryData:
    quantiles: Tuple[Quantile, ...] = ()
    labels: Labels = Labels.EMPTY
    count: Optional[int] = None
    sum: Optional[float] = None
    exemplars: Exemplars = Exemplars.EMPTY
    created_timestamp_millis: Optional[int] = None
    scrape_timestamp_millis: Optional[int] = None


# Snapshots: one metric family each.

@dataclass(frozen=True)
class CounterSnapshot:
    metadata: MetricMetadata
    data: Sequence[CounterData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.COUNTER


@dataclass(frozen=True)
class GaugeSnapshot:
    metadata: MetricMetadata
    data: Sequence[GaugeData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.GAUGE


@dataclass(frozen=True)
class UnknownSnapshot:
    metadata: MetricMetadata
    data: Sequence[UnknownData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.UNKNOWN


@dataclass(frozen=True)
class InfoSnapshot:
    metadata: MetricMetadata
    data: Sequence[InfoData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.INFO


@dataclass(frozen=True)
class StateSetSnapshot:
    metadata: MetricMetadata
    data: Sequence[StateSetData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.STATESET


@dataclass(frozen=True)
class ClassicHistogramSnapshot:
    metadata: MetricMetadata
    data: Sequence[ClassicHistogramData] = ()
    gauge_histogram: bool = False

    @property
    def metric_type(self) -> MetricType:
        return MetricType.GAUGE_HISTOGRAM if self.gauge_histogram else MetricType.HISTOGRAM


@dataclass(frozen=True)
class NativeHistogramSnapshot:
    metadata: MetricMetadata
    data: Sequence[NativeHistogramData] = ()
    gauge_histogram: bool = False

    @property
    def metric_type(self) -> MetricType:
        return MetricType.GAUGE_HISTOGRAM if self.gauge_histogram else MetricType.HISTOGRAM


@dataclass(frozen=True)
class SummarySnapshot:
    metadata: MetricMetadata
    data: Sequence[SummaryData] = ()

    @property
    def metric_type(self) -> MetricType:
        return MetricType.SUMMARY
