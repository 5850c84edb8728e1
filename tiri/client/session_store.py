"""
Client-side session cache for scripts and tools that talk to the studio API.

Mirrors what the dashboard keeps in memory: whether we are logged in, the
``{user, studio}`` payload of the last successful call, and the last error.
Cookies live on the underlying HTTP session object.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests

from tiri.core.logger import logger


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class SessionRequestFailed(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def read_api_error(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Request failed"
    if not isinstance(body, dict):
        return "Request failed"
    return body.get("error") or "Request failed"


class StudioSessionClient:
    """
    ``http`` is anything with ``get``/``post`` in the style of
    ``requests.Session`` (a FastAPI ``TestClient`` works too).
    """

    def __init__(self, base_url: str = "", http=None, timeout: int = 30):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout
        self.state = SessionState()

    @property
    def is_authenticated(self) -> bool:
        return self.state.status == SessionStatus.AUTHENTICATED

    def clear_error(self) -> None:
        self.state.error = None

    # =====================================================
    # TRANSITIONS
    # =====================================================

    def _start(self) -> None:
        self.state.status = SessionStatus.LOADING
        self.state.error = None

    def _authenticated(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.state.status = SessionStatus.AUTHENTICATED
        self.state.data = data
        self.state.error = None
        return data

    def _unauthenticated(self, error: Optional[str]) -> None:
        self.state.status = SessionStatus.UNAUTHENTICATED
        self.state.data = None
        self.state.error = error

    def _send(self, method: str, path: str, fallback_error: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = getattr(self.http, method)(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"SESSION REQUEST FAILED | path={path} | error={e}")
            self._unauthenticated(fallback_error)
            raise SessionRequestFailed(fallback_error)

        if response.status_code >= 400:
            message = read_api_error(response)
            self._unauthenticated(message)
            raise SessionRequestFailed(message)

        return response

    # =====================================================
    # OPERATIONS
    # =====================================================

    def fetch_session(self) -> Dict[str, Any]:
        self._start()
        response = self._send("get", "/api/auth/session", "Unable to load session")
        return self._authenticated(response.json())

    def ensure_session(self) -> Optional[Dict[str, Any]]:
        """Load the session once; later calls return the cached state."""
        if self.state.status == SessionStatus.IDLE:
            try:
                self.fetch_session()
            except SessionRequestFailed:
                return None
        return self.state.data

    def login(self, phone: str, password: str) -> Dict[str, Any]:
        self._start()
        response = self._send(
            "post",
            "/api/auth/login",
            "Login failed",
            json={"phone": phone, "password": password},
        )
        return self._authenticated(response.json())

    def logout(self) -> None:
        self._start()
        self._send("post", "/api/auth/logout", "Logout failed")
        self._unauthenticated(None)
