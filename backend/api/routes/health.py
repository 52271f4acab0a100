"""
Liveness and readiness probes.

/health only proves the process answers. /ready reports whether the
billing core can serve requests, which depends on configuration alone:
no Stripe or Supabase round trip is made from a probe.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str


class ReadinessResponse(BaseModel):
    """
    ``missing`` lists required settings that are unset. ``features``
    flags the optional parts that degrade rather than block startup.
    """

    status: str
    missing: list[str] = []
    features: dict[str, bool] = {}


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check():
    """Ready when every required setting is present; 503 otherwise."""
    settings = get_settings()
    missing = settings.missing_required()
    readiness = ReadinessResponse(
        status="not_ready" if missing else "ready",
        missing=missing,
        features={
            "webhooks": bool(settings.stripe_webhook_secret),
            "account_linking": bool(
                settings.supabase_service_role_key and settings.linking_secret
            ),
        },
    )
    if missing:
        return JSONResponse(status_code=503, content=readiness.model_dump())
    return readiness
