"""Textfile exporter: writes OpenMetrics documents to disk for node-level scrapers"""
import os
from pathlib import Path
from typing import Iterable, Optional
from config import Config
from logging_config import get_logger
from .openmetrics import OpenMetricsTextFormatWriter


logger = get_logger(__name__)


class TextfileExporter:
    """Write encoded metric snapshots to a file atomically"""

    def __init__(self, config: Config):
        if config.textfile_path is None:
            raise ValueError("TEXTFILE_PATH must be set to use the textfile exporter")
        self.config = config
        self.metrics_file: Path = config.textfile_path
        self.writer = OpenMetricsTextFormatWriter.from_config(config)

    def write_metrics_file(self, snapshots: Iterable) -> bool:
        """Write snapshots to the metrics file, replacing it atomically"""
        temp_file = self.metrics_file.with_name(self.metrics_file.name + ".tmp")
        try:
            self.metrics_file.parent.mkdir(parents=True, exist_ok=True)

            with open(temp_file, 'wb') as f:
                self.writer.write(f, snapshots)

            os.replace(temp_file, self.metrics_file)
            os.chmod(self.metrics_file, 0o644)

            logger.debug("Wrote metrics file", path=str(self.metrics_file), event_type="textfile_write")
            return True

        except OSError as e:
            logger.error("Failed to write metrics file", path=str(self.metrics_file), error=str(e), event_type="textfile_error")
            return False

        finally:
            # Only a successful os.replace consumes the temp file
            if temp_file.exists():
                temp_file.unlink()

    def read_metrics_file(self) -> Optional[str]:
        """Read the last written metrics document, if any"""
        if not self.metrics_file.exists():
            return None
        return self.metrics_file.read_text(encoding='utf-8')
