"""OpenMetrics text format writer"""
import codecs
import io
import time
from typing import BinaryIO, Iterable, Optional, TextIO

from config import Config
from logging_config import get_logger, log_error, log_exposition
from metrics.models import (
    ClassicHistogramData,
    ClassicHistogramSnapshot,
    CounterSnapshot,
    Exemplars,
    GaugeSnapshot,
    InfoSnapshot,
    MetricMetadata,
    MetricType,
    NativeHistogramSnapshot,
    StateSetSnapshot,
    SummarySnapshot,
    UnknownSnapshot,
)
from metrics.native import native_to_classic
from .text_format import (
    escape,
    format_double,
    format_long,
    format_timestamp,
    write_name_and_labels,
    write_scrape_timestamp_and_exemplar,
)


logger = get_logger(__name__)

CONTENT_TYPE = "application/openmetrics-text; version=1.0.0; charset=utf-8"


class OpenMetricsTextFormatWriter:
    """Encodes metric snapshots as an OpenMetrics text document.

    The writer holds no state besides the created-timestamps flag, so a
    single instance can be shared between concurrent calls on distinct sinks.
    """

    CONTENT_TYPE = CONTENT_TYPE

    def __init__(self, created_timestamps_enabled: bool = False):
        self.created_timestamps_enabled = created_timestamps_enabled
        self._emitters = {
            CounterSnapshot: self._write_counter,
            GaugeSnapshot: self._write_gauge,
            ClassicHistogramSnapshot: self._write_classic_histogram,
            NativeHistogramSnapshot: self._write_native_histogram,
            SummarySnapshot: self._write_summary,
            InfoSnapshot: self._write_info,
            StateSetSnapshot: self._write_state_set,
            UnknownSnapshot: self._write_unknown,
        }

    @classmethod
    def from_config(cls, config: Config) -> "OpenMetricsTextFormatWriter":
        return cls(created_timestamps_enabled=config.created_timestamps_enabled)

    def write(self, out: BinaryIO, snapshots: Iterable) -> None:
        """Stream the document for ``snapshots`` to ``out`` as UTF-8 and flush it.

        Families are written in the given order and families without data
        points are skipped. Errors raised by ``out`` propagate to the caller;
        whatever was written before the failure stays written.
        """
        start_time = time.time()
        # Unencodable characters such as lone surrogates become "?"
        writer = codecs.getwriter("utf-8")(out, errors="replace")
        written = 0
        skipped = 0
        try:
            for snapshot in snapshots:
                if len(snapshot.data) == 0:
                    skipped += 1
                    continue
                self._emitter_for(snapshot)(writer, snapshot)
                written += 1
            writer.write("# EOF\n")
            out.flush()
        except OSError as e:
            log_error(logger, e, {"families_written": written})
            raise
        log_exposition(logger, families_written=written, families_skipped=skipped,
                       duration=time.time() - start_time)

    def _emitter_for(self, snapshot):
        """Find the emitter for the snapshot's class or its nearest base class"""
        for cls in type(snapshot).__mro__:
            emitter = self._emitters.get(cls)
            if emitter is not None:
                return emitter
        raise TypeError(f"Unsupported metric snapshot type: {type(snapshot).__name__}")

    def _write_counter(self, writer: TextIO, snapshot: CounterSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        for data in snapshot.data:
            write_name_and_labels(writer, metadata.name, "_total", data.labels)
            writer.write(format_double(data.value))
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, data.exemplar)
            self._write_created(writer, metadata, data)

    def _write_gauge(self, writer: TextIO, snapshot: GaugeSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        for data in snapshot.data:
            write_name_and_labels(writer, metadata.name, None, data.labels)
            writer.write(format_double(data.value))
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, data.exemplar)

    def _write_unknown(self, writer: TextIO, snapshot: UnknownSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        for data in snapshot.data:
            write_name_and_labels(writer, metadata.name, None, data.labels)
            writer.write(format_double(data.value))
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, data.exemplar)

    def _write_classic_histogram(self, writer: TextIO, snapshot: ClassicHistogramSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        if snapshot.gauge_histogram:
            count_suffix, sum_suffix = "_gcount", "_gsum"
        else:
            count_suffix, sum_suffix = "_count", "_sum"
        for data in snapshot.data:
            self._write_classic_histogram_buckets(writer, metadata, data)
            if data.count is not None and data.sum is not None:
                # _count and _sum come as a pair, and never carry exemplars
                self._write_count_and_sum(writer, metadata, data, count_suffix, sum_suffix, Exemplars.EMPTY)
            self._write_created(writer, metadata, data)

    def _write_classic_histogram_buckets(self, writer: TextIO, metadata: MetricMetadata,
                                         data: ClassicHistogramData) -> None:
        buckets = data.buckets
        cumulative_count = 0
        lower_bound = float("-inf")
        for i in range(len(buckets)):
            upper_bound = buckets.get_upper_bound(i)
            cumulative_count += buckets.get_count(i)
            write_name_and_labels(writer, metadata.name, "_bucket", data.labels, "le", format_double(upper_bound))
            writer.write(format_long(cumulative_count))
            exemplar = data.exemplars.get(lower_bound, upper_bound)
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, exemplar)
            lower_bound = upper_bound

    def _write_native_histogram(self, writer: TextIO, snapshot: NativeHistogramSnapshot) -> None:
        # No text representation exists for native histograms, so they go out as classic ones.
        self._write_classic_histogram(writer, native_to_classic(snapshot))

    def _write_summary(self, writer: TextIO, snapshot: SummarySnapshot) -> None:
        metadata = snapshot.metadata
        metadata_written = False
        for data in snapshot.data:
            if len(data.quantiles) == 0 and data.count is None and data.sum is None:
                continue
            if not metadata_written:
                self._write_metadata(writer, snapshot.metric_type, metadata)
                metadata_written = True
            exemplars = data.exemplars
            # Quantiles rotate through exemplars starting at index 2 (mod the number of exemplars).
            exemplar_index = 1
            for quantile in data.quantiles:
                write_name_and_labels(writer, metadata.name, None, data.labels,
                                      "quantile", format_double(quantile.quantile))
                writer.write(format_double(quantile.value))
                exemplar = None
                if len(exemplars) > 0:
                    exemplar_index = (exemplar_index + 1) % len(exemplars)
                    exemplar = exemplars[exemplar_index]
                write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, exemplar)
            # Either of _count and _sum may be present on its own.
            self._write_count_and_sum(writer, metadata, data, "_count", "_sum", exemplars)
            self._write_created(writer, metadata, data)

    def _write_info(self, writer: TextIO, snapshot: InfoSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        for data in snapshot.data:
            write_name_and_labels(writer, metadata.name, "_info", data.labels)
            writer.write("1")
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, None)

    def _write_state_set(self, writer: TextIO, snapshot: StateSetSnapshot) -> None:
        metadata = snapshot.metadata
        self._write_metadata(writer, snapshot.metric_type, metadata)
        for data in snapshot.data:
            for state, active in data.states:
                write_name_and_labels(writer, metadata.name, None, data.labels, metadata.name, state)
                writer.write("1" if active else "0")
                write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, None)

    def _write_count_and_sum(self, writer: TextIO, metadata: MetricMetadata, data, count_suffix: str,
                             sum_suffix: str, exemplars: Exemplars) -> None:
        exemplar_index = 0
        if data.count is not None:
            write_name_and_labels(writer, metadata.name, count_suffix, data.labels)
            writer.write(format_long(data.count))
            exemplar = exemplars[exemplar_index] if len(exemplars) > 0 else None
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, exemplar)
            # _sum moves on to the second exemplar, if there is one
            if len(exemplars) > 1:
                exemplar_index = 1
        if data.sum is not None:
            write_name_and_labels(writer, metadata.name, sum_suffix, data.labels)
            writer.write(format_double(data.sum))
            exemplar = exemplars[exemplar_index] if len(exemplars) > 0 else None
            write_scrape_timestamp_and_exemplar(writer, data.scrape_timestamp_millis, exemplar)

    def _write_created(self, writer: TextIO, metadata: MetricMetadata, data) -> None:
        if not self.created_timestamps_enabled or data.created_timestamp_millis is None:
            return
        write_name_and_labels(writer, metadata.name, "_created", data.labels)
        writer.write(format_timestamp(data.created_timestamp_millis))
        if data.scrape_timestamp_millis is not None:
            writer.write(" ")
            writer.write(format_timestamp(data.scrape_timestamp_millis))
        writer.write("\n")

    def _write_metadata(self, writer: TextIO, metric_type: MetricType, metadata: MetricMetadata) -> None:
        writer.write(f"# TYPE {metadata.name} {metric_type.value}\n")
        if metadata.unit is not None:
            writer.write(f"# UNIT {metadata.name} {escape(metadata.unit)}\n")
        if metadata.help:
            writer.write(f"# HELP {metadata.name} {escape(metadata.help)}\n")


def generate_latest(snapshots: Iterable, created_timestamps_enabled: bool = False,
                    writer: Optional[OpenMetricsTextFormatWriter] = None) -> bytes:
    """Encode ``snapshots`` into an in-memory OpenMetrics document"""
    if writer is None:
        writer = OpenMetricsTextFormatWriter(created_timestamps_enabled)
    buffer = io.BytesIO()
    writer.write(buffer, snapshots)
    return buffer.getvalue()
