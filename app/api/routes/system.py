from fastapi import APIRouter

from infrastructure.services import SettingsDep

router = APIRouter(tags=["System"])


@router.get("/health")
def get_health():
    """Healthcheck endpoint."""
    return {"status": "ok"}


@router.get("/version")
def get_version(settings: SettingsDep):
    """Get the configured default localization and environment."""
    return {
        "production": settings.is_production,
        "default_localization": settings.localization.default_localization,
    }
