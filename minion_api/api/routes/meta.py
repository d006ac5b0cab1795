from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from minion.config import MinionSettings
from minion_api.api.deps import get_minion_settings
from minion_api.core.config import get_settings
from minion_api.schemas.meta import ConfigOut, ConfigResponse, HealthOut, HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        success=True,
        message="Service is running",
        data=HealthOut(status="healthy", timestamp=datetime.now(timezone.utc), version=get_settings().version),
    )


@router.get("/config", response_model=ConfigResponse)
def config(settings: MinionSettings = Depends(get_minion_settings)) -> ConfigResponse:
    # Credentials and database URLs stay out of this payload.
    return ConfigResponse(
        success=True,
        message="Current configuration",
        data=ConfigOut(
            restaurant_source=settings.restaurant_source,
            aws_region=settings.aws_region,
            aws_secret_name=settings.aws_secret_name,
            extension_years=settings.extension_years,
            max_workers=settings.max_workers,
        ),
    )
