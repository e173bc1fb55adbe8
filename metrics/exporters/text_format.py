"""Low-level writers shared by the text exposition format emitters.

Formatters return strings. Writers take any text sink with a ``write(str)``
method and append to it in place.
"""
import math
from typing import Optional, TextIO

from metrics.models import Exemplar, Labels


def escape(value: str) -> str:
    """Escape backslash, double quote and newline; everything else is copied verbatim"""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_double(value: float) -> str:
    """Shortest round-trip representation, with OpenMetrics spellings for infinities"""
    if value == math.inf:
        return "+Inf"
    if value == -math.inf:
        return "-Inf"
    if math.isnan(value):
        return "NaN"
    return repr(float(value))


def format_long(value: int) -> str:
    return str(int(value))


def format_timestamp(timestamp_millis: int) -> str:
    """Render milliseconds since the epoch as seconds with exactly three decimals"""
    sign = "-" if timestamp_millis < 0 else ""
    seconds, millis = divmod(abs(int(timestamp_millis)), 1000)
    return f"{sign}{seconds}.{millis:03d}"


def write_labels(writer: TextIO, labels: Labels, additional_name: Optional[str] = None,
                 additional_value: Optional[str] = None) -> None:
    """Write ``{name="value",...}``, appending the additional label last if given"""
    writer.write("{")
    for i, (name, value) in enumerate(labels):
        if i > 0:
            writer.write(",")
        writer.write(name)
        writer.write('="')
        writer.write(escape(value))
        writer.write('"')
    if additional_name is not None:
        if len(labels) > 0:
            writer.write(",")
        writer.write(additional_name)
        writer.write('="')
        writer.write(escape(additional_value))
        writer.write('"')
    writer.write("}")


def write_name_and_labels(writer: TextIO, name: str, suffix: Optional[str], labels: Labels,
                          additional_name: Optional[str] = None,
                          additional_value: Optional[str] = None) -> None:
    """Write the series name and label set, followed by the space preceding the value"""
    writer.write(name)
    if suffix is not None:
        writer.write(suffix)
    if len(labels) > 0 or additional_name is not None:
        write_labels(writer, labels, additional_name, additional_value)
    writer.write(" ")


def write_exemplar(writer: TextIO, exemplar: Exemplar) -> None:
    """Write `` # {labels} value[ timestamp]``"""
    writer.write(" # ")
    write_labels(writer, exemplar.labels)
    writer.write(" ")
    writer.write(format_double(exemplar.value))
    if exemplar.has_timestamp():
        writer.write(" ")
        writer.write(format_timestamp(exemplar.timestamp_millis))


def write_scrape_timestamp_and_exemplar(writer: TextIO, scrape_timestamp_millis: Optional[int],
                                        exemplar: Optional[Exemplar]) -> None:
    """Finish a sample line: optional timestamp, optional exemplar, newline"""
    if scrape_timestamp_millis is not None:
        writer.write(" ")
        writer.write(format_timestamp(scrape_timestamp_millis))
    if exemplar is not None:
        write_exemplar(writer, exemplar)
    writer.write("\n")
