"""Configuration module using pydantic for environment-based settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Exporter settings loaded from ELCENTRAL_* environment variables or .env."""

    # Serial link to the meter
    serial_port: str = "/dev/tty.usbserial-A19JSWCW"
    baud_rate: int = Field(default=115200, gt=0)

    # Scrape server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)
    metric_prefix: str = "elcentral_"

    # Diagnostics
    debug: bool = False
    log_buffer_size: int = Field(default=1000, gt=0)

    # Skip malformed numeric payloads instead of exporting 0.0
    strict_parsing: bool = False

    model_config = SettingsConfigDict(
        env_prefix="ELCENTRAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
