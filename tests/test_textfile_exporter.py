"""Tests for the textfile exporter"""
from unittest.mock import patch
import pytest

from config import Config
from metrics.models import CounterData, CounterSnapshot, GaugeData, GaugeSnapshot, Labels, MetricMetadata
from metrics.exporters.textfile import TextfileExporter


class TestTextfileExporter:
    """Test atomic metrics file output"""

    @pytest.fixture(autouse=True)
    def setup_exporter(self, tmp_path):
        """Setup test fixtures"""
        self.metrics_file = tmp_path / "textfile" / "app.prom"
        self.config = Config(textfile_path=self.metrics_file, created_timestamps_enabled=True)
        self.exporter = TextfileExporter(self.config)
        self.snapshots = [
            CounterSnapshot(MetricMetadata("jobs"), [CounterData(2.0, Labels.of("queue", "default"), created_timestamp_millis=5000)]),
            GaugeSnapshot(MetricMetadata("workers"), [GaugeData(4.0)]),
        ]

    def test_write_metrics_file(self):
        """Test writing and reading back the document"""
        assert self.exporter.write_metrics_file(self.snapshots) is True

        content = self.exporter.read_metrics_file()
        assert content == (
            "# TYPE jobs counter\n"
            'jobs_total{queue="default"} 2.0\n'
            'jobs_created{queue="default"} 5.000\n'
            "# TYPE workers gauge\n"
            "workers 4.0\n"
            "# EOF\n"
        )
        assert not self.metrics_file.with_name("app.prom.tmp").exists()

    def test_write_replaces_previous_file(self):
        self.exporter.write_metrics_file(self.snapshots)
        self.exporter.write_metrics_file([])

        assert self.exporter.read_metrics_file() == "# EOF\n"

    def test_write_failure(self):
        """Test that write failures are reported and the temp file removed"""
        with patch('metrics.exporters.textfile.os.replace', side_effect=OSError("Read-only file system")):
            assert self.exporter.write_metrics_file(self.snapshots) is False

        assert not self.metrics_file.exists()
        assert not self.metrics_file.with_name("app.prom.tmp").exists()

    def test_read_missing_file(self):
        assert self.exporter.read_metrics_file() is None

    def test_requires_textfile_path(self):
        """Test that the exporter needs a configured path"""
        with pytest.raises(ValueError):
            TextfileExporter(Config(textfile_path=None))

    def test_unsupported_snapshot_removes_temp_file(self):
        """Test that non-I/O failures propagate without leaving the temp file behind"""

        class CustomSnapshot:
            metadata = MetricMetadata("custom")
            data = [1]

        with pytest.raises(TypeError):
            self.exporter.write_metrics_file([CustomSnapshot()])

        assert not self.metrics_file.exists()
        assert not self.metrics_file.with_name("app.prom.tmp").exists()
