"""Tests for the shared text format writers"""
import io
import math
import pytest

from metrics.models import Exemplar, Labels
from metrics.exporters.text_format import (
    escape,
    format_double,
    format_long,
    format_timestamp,
    write_exemplar,
    write_labels,
    write_name_and_labels,
    write_scrape_timestamp_and_exemplar,
)


class TestEscaping:
    """Test escaping of help, unit and label values"""

    def test_escape_special_characters(self):
        """Test backslash, double quote and newline escaping"""
        assert escape('a\\b"c\n') == 'a\\\\b\\"c\\n'

    def test_escape_leaves_other_characters(self):
        """Test that tabs and non-ASCII characters are copied verbatim"""
        assert escape("tab\there ünïcödé") == "tab\there ünïcödé"

    def test_escape_empty(self):
        assert escape("") == ""


class TestNumberFormatting:
    """Test float, integer and timestamp formatting"""

    @pytest.mark.parametrize("value,expected", [
        (3.0, "3.0"),
        (0.1, "0.1"),
        (-2.5, "-2.5"),
        (1e-05, "1e-05"),
        (12345678.9, "12345678.9"),
        (math.inf, "+Inf"),
        (-math.inf, "-Inf"),
        (math.nan, "NaN"),
    ])
    def test_format_double(self, value, expected):
        """Test shortest round-trip float formatting"""
        assert format_double(value) == expected

    def test_format_double_accepts_int(self):
        """Test that integral values are rendered as floats"""
        assert format_double(2) == "2.0"

    def test_format_long(self):
        assert format_long(0) == "0"
        assert format_long(1234567890123) == "1234567890123"

    @pytest.mark.parametrize("millis,expected", [
        (1007, "1.007"),
        (1450, "1.450"),
        (1000, "1.000"),
        (1070, "1.070"),
        (7, "0.007"),
        (0, "0.000"),
        (1672850685829, "1672850685.829"),
        (-1500, "-1.500"),
    ])
    def test_format_timestamp(self, millis, expected):
        """Test millisecond padding of timestamps"""
        assert format_timestamp(millis) == expected


class TestLabelWriters:
    """Test label set and series name rendering"""

    def setup_method(self):
        """Setup test fixtures"""
        self.out = io.StringIO()

    def test_write_labels(self):
        """Test label rendering keeps insertion order"""
        write_labels(self.out, Labels.of("zone", "b", "app", "a"))

        assert self.out.getvalue() == '{zone="b",app="a"}'

    def test_write_labels_escapes_values(self):
        """Test that label values are escaped"""
        write_labels(self.out, Labels.of("path", 'C:\\"x"'))

        assert self.out.getvalue() == '{path="C:\\\\\\"x\\""}'

    def test_write_labels_with_additional_label(self):
        """Test that an additional label is appended last"""
        write_labels(self.out, Labels.of("job", "x"), "le", "1.0")

        assert self.out.getvalue() == '{job="x",le="1.0"}'

    def test_write_empty_labels(self):
        """Test that an empty label set still renders braces"""
        write_labels(self.out, Labels.EMPTY)

        assert self.out.getvalue() == "{}"

    def test_write_name_without_labels(self):
        """Test that labels are omitted entirely when there are none"""
        write_name_and_labels(self.out, "requests", "_total", Labels.EMPTY)

        assert self.out.getvalue() == "requests_total "

    def test_write_name_with_only_additional_label(self):
        """Test that a lone additional label gets no leading comma"""
        write_name_and_labels(self.out, "latency", "_bucket", Labels.EMPTY, "le", "+Inf")

        assert self.out.getvalue() == 'latency_bucket{le="+Inf"} '

    def test_write_name_with_labels(self):
        write_name_and_labels(self.out, "temperature", None, Labels.of("room", "kitchen"))

        assert self.out.getvalue() == 'temperature{room="kitchen"} '


class TestExemplarWriters:
    """Test exemplar and line terminator rendering"""

    def setup_method(self):
        """Setup test fixtures"""
        self.out = io.StringIO()

    def test_write_exemplar(self):
        """Test exemplar with labels and timestamp"""
        exemplar = Exemplar(0.67, Labels.of("trace_id", "abc"), timestamp_millis=1672850685829)

        write_exemplar(self.out, exemplar)

        assert self.out.getvalue() == ' # {trace_id="abc"} 0.67 1672850685.829'

    def test_write_exemplar_without_labels_or_timestamp(self):
        write_exemplar(self.out, Exemplar(2.0))

        assert self.out.getvalue() == " # {} 2.0"

    def test_write_scrape_timestamp_and_exemplar(self):
        """Test that the timestamp precedes the exemplar"""
        write_scrape_timestamp_and_exemplar(self.out, 1672850585820, Exemplar(1.0, Labels.of("id", "1")))

        assert self.out.getvalue() == ' 1672850585.820 # {id="1"} 1.0\n'

    def test_write_line_end_only(self):
        """Test that only a newline is written without timestamp or exemplar"""
        write_scrape_timestamp_and_exemplar(self.out, None, None)

        assert self.out.getvalue() == "\n"
