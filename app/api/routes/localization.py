from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from infrastructure.localization import CompositionError
from infrastructure.logging import get_module_logger
from infrastructure.services import LocalizationDep, LocalizedRouterDep

logger = get_module_logger()
router = APIRouter(prefix="/localization", tags=["Localization"])


@router.get("")
def get_localization(
    request: Request,
    localization: LocalizationDep,
    localized_router: LocalizedRouterDep,
):
    """Return the localization resolved for this request."""
    resolution = getattr(request.state, "localization_resolution", None)
    return {
        "localization": str(localization),
        "is_first_request": resolution.is_first_request if resolution else None,
        "source": resolution.source.value if resolution else None,
        "allowed": localized_router.config.get_allowed_localizations(),
    }


@router.get("/urls/{route_name}")
def build_url(
    route_name: str,
    request: Request,
    localized_router: LocalizedRouterDep,
    localization: Optional[str] = None,
):
    """Build a localized URL for a route from the query string params."""
    params = {
        name: value
        for name, value in request.query_params.items()
        if name != "localization"
    }
    if localization:
        params[localized_router.config.localization_param_name] = localization
    try:
        url = localized_router.url(route_name, params)
    except CompositionError as e:
        logger.warning("url_build_failed", route=route_name, error=str(e))
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"route": route_name, "url": url}
