"""Configuration management for the OpenMetrics exporter"""
from pathlib import Path
from typing import Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Exposition settings
    created_timestamps_enabled: bool = Field(default=False, description="Emit _created lines for counters, histograms and summaries")

    # Textfile output (only used by TextfileExporter)
    textfile_path: Optional[Path] = Field(default=None, description="Path of the .prom file written by the textfile exporter")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file path (console only if not set)")

    # Service settings
    service_name: str = Field(default="openmetrics-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            return v.upper()
        return v

    @validator('textfile_path', 'log_file')
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    def is_textfile_enabled(self) -> bool:
        """Check if a textfile output path is configured"""
        return self.textfile_path is not None
