"""Health check endpoint for the web API."""

from fastapi import APIRouter

from dialysis_log.web.api.dependencies import ConfigDep
from dialysis_log.web.models.health import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(config: ConfigDep) -> HealthResponse:
    """Report service status and the limits uploads are checked against."""
    return HealthResponse(
        status="healthy",
        max_upload_bytes=config.max_file_size,
        csv_quoting=config.csv_quoting.value,
    )
