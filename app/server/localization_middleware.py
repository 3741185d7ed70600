"""Localization middleware.

Resolves the request localization before the endpoint runs, stores it on
``request.state.localization`` and in the session, and redirects the first
request of a session to the default localization when configured to and
a localized route owns the requested path.
"""

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from infrastructure.localization import LocaleIdentifier, RequestSignals
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.routing import LocalizedRouter

logger = get_module_logger()


class LocalizationMiddleware(BaseHTTPMiddleware):
    """Resolve the localization of every request.

    The session is used when ``SessionMiddleware`` runs outside of this
    middleware; without it every request counts as a first request.
    """

    def __init__(self, app, router: LocalizedRouter, session_key: str = "localization"):
        super().__init__(app)
        self.router = router
        self.session_key = session_key

    def _url_localization(self, path: str) -> Optional[str]:
        segment = path.lstrip("/").split("/", 1)[0]
        return segment or None

    async def dispatch(self, request: Request, call_next):
        session = request.session if "session" in request.scope else None
        stored = None
        if session is not None:
            stored = LocaleIdentifier.try_parse(session.get(self.session_key))

        query_params = dict(request.query_params)
        signals = RequestSignals(
            query_params=query_params,
            accept_language=request.headers.get("accept-language"),
            session_localization=stored,
            url_localization=self._url_localization(request.url.path),
        )
        result = self.router.resolve(signals)
        decision = result.redirect

        location = None
        if decision.redirect:
            location = self.router.redirect_url(
                request.url.path, query_params, decision.target
            )

        if session is not None:
            target = decision.target if location is not None else result.localization
            session[self.session_key] = str(target)

        if location is not None:
            logger.info(
                "first_request_redirected",
                detected=str(result.localization),
                target=str(decision.target),
                location=location,
            )
            self.router.reset()
            return RedirectResponse(location, status_code=307)

        request.state.localization = result.localization
        request.state.localization_resolution = result
        try:
            with bind_request_context(
                request_path=request.url.path,
                request_method=request.method,
                localization=str(result.localization),
            ):
                return await call_next(request)
        finally:
            self.router.reset()
