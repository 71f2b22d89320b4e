"""
Health check routes for the inference gateway
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from inference_gateway.config import Settings
from inference_gateway.models.prediction import HealthResponse
from inference_gateway.utils.dependencies import get_app_settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        apnea_url=settings.apnea_url,
        diabetes_url=settings.diabetes_url,
    )
