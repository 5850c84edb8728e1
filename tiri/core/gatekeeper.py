from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse

from tiri.core.auth_context import get_session_token, is_protected_path
from tiri.core.logger import logger


class EdgeGatekeeperMiddleware(BaseHTTPMiddleware):
    """
    Cheap "are you logged in at all" filter in front of the dashboard.

    Only the presence of the session cookie is checked here. Signature and
    expiry are verified by ``get_current_session`` inside each handler.
    """

    def __init__(self, app, protected_prefixes: Iterable[str], login_path: str = "/"):
        super().__init__(app)
        self._prefixes = tuple(protected_prefixes)
        self._login_path = login_path

    def is_protected(self, path: str) -> bool:
        return is_protected_path(path, self._prefixes)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not self.is_protected(path) or get_session_token(request):
            return await call_next(request)

        logger.info(f"GATEKEEPER REJECT | path={path}")

        if path.startswith("/api/"):
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        return RedirectResponse(url=self._login_path)
