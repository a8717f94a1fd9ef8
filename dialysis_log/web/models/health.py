"""Health check models for the web API."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from dialysis_log import __version__


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Overall service status
        timestamp: Current timestamp
        version: Application version
        max_upload_bytes: Largest upload the converter accepts
        csv_quoting: Quoting mode used for CSV downloads
    """
    status: Literal["healthy", "unhealthy"]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Current UTC timestamp")
    version: str = Field(default=__version__, description="Application version")
    max_upload_bytes: int
    csv_quoting: str
