# ============================================================================
# src/medicine_resolver/config/logging_config.py
# ============================================================================
"""
Logging & Monitoring Settings
- Log level and format
- Optional log file
- Performance metrics
"""

from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings

class LoggingSettings(BaseSettings):
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FORMAT_JSON: bool = Field(
        default=False,
        description="Emit log records as JSON lines"
    )
    LOG_FILE: Optional[Path] = Field(
        default=None,
        description="Optional log file in addition to stdout"
    )
    ENABLE_METRICS: bool = Field(
        default=True,
        description="Enable performance metric collection"
    )

logging_settings = LoggingSettings()
