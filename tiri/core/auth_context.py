from typing import Iterable, Optional

from starlette.requests import HTTPConnection

from tiri.core.config import settings
from tiri.core.errors import NoSession
from tiri.core.security import TokenCodec, TokenError
from tiri.core.session import SessionContext


def is_protected_path(path: str, prefixes: Iterable[str]) -> bool:
    for prefix in prefixes:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


def get_session_token(request: HTTPConnection) -> Optional[str]:
    # empty value is what logout leaves behind
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def resolve_session(request: HTTPConnection, codec: TokenCodec) -> SessionContext:
    token = get_session_token(request)
    if not token:
        raise NoSession()

    try:
        claims = codec.verify(token)
    except TokenError as e:
        raise NoSession() from e

    return SessionContext(
        user_id=claims.user_id,
        studio_id=claims.studio_id,
        role=claims.role,
        phone=claims.phone,
    )
