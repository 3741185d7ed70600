"""FastAPI application assembly."""

from typing import Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from api.router import api_router
from infrastructure.logging import get_module_logger
from infrastructure.routing import LocalizedRouter
from infrastructure.services import get_localized_router, get_settings
from server.localization_middleware import LocalizationMiddleware
from server.routes import register_routes

logger = get_module_logger()


def create_app(router: Optional[LocalizedRouter] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        router: Localized router to use, defaults to the shared singleton.

    Returns:
        Configured FastAPI application.
    """
    settings = get_settings()
    router = router or get_localized_router()
    register_routes(router)

    app = FastAPI()
    # Endpoints use the same router as the middleware
    app.dependency_overrides[get_localized_router] = lambda: router
    # Middleware added last runs first: the session must wrap localization
    app.add_middleware(
        LocalizationMiddleware,
        router=router,
        session_key=settings.server.SESSION_LOCALIZATION_KEY,
    )
    app.add_middleware(SessionMiddleware, secret_key=settings.server.SECRET_KEY)
    app.include_router(api_router)

    logger.info(
        "app_created",
        default_localization=router.config.get_default_localization(as_string=True),
        allowed_localizations=router.config.get_allowed_localizations(),
    )
    return app


handler = create_app()
