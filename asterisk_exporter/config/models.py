"""Pydantic configuration models for the Asterisk exporter."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import re

from ..utils.logger import LOG_FORMATS

KNOWN_COLLECTORS = ("sip",)


class SSHConfig(BaseModel):
    """Remote PBX access via SSH. Commands run locally when not configured."""
    host: str
    ssh_key_path: str
    port: int = Field(default=22, ge=1, le=65535)
    username: str = "asterisk"


class AsteriskConfig(BaseModel):
    """How to reach the Asterisk CLI."""
    binary: str = "asterisk"
    command_timeout: float = Field(default=5.0, gt=0)
    ssh: Optional[SSHConfig] = None


class ExporterSettings(BaseModel):
    """HTTP endpoint and metric naming configuration."""
    namespace: str = "asterisk"
    listen_address: str = "0.0.0.0"
    port: int = Field(default=9200, ge=1, le=65535)
    collectors: List[str] = Field(default_factory=lambda: list(KNOWN_COLLECTORS))

    @field_validator('namespace')
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Metric namespace must be a valid Prometheus name fragment."""
        if not re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*$', v):
            raise ValueError('Namespace must match [a-zA-Z_][a-zA-Z0-9_]*')
        return v

    @field_validator('collectors')
    @classmethod
    def validate_collectors(cls, v: List[str]) -> List[str]:
        """Only known collectors may be enabled."""
        unknown = [name for name in v if name not in KNOWN_COLLECTORS]
        if unknown:
            raise ValueError(f"Unknown collector(s): {', '.join(unknown)}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard logging level names only."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator('format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Accept a format setup_logger can render."""
        if v not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {v}")
        return v


class ExporterConfig(BaseModel):
    """Root configuration model for the exporter."""
    exporter: ExporterSettings = Field(default_factory=ExporterSettings)
    asterisk: AsteriskConfig = Field(default_factory=AsteriskConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
