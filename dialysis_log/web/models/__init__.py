"""Web API Pydantic models."""

from dialysis_log.web.models.conversion import ConversionResponse, RecordRow
from dialysis_log.web.models.health import HealthResponse

__all__ = ["ConversionResponse", "RecordRow", "HealthResponse"]
