from typing import Optional

from fastapi import Depends, Request

from tiri.core.auth_context import is_protected_path, resolve_session
from tiri.core.config import settings
from tiri.core.errors import Forbidden, NoSession
from tiri.core.security import TokenCodec
from tiri.core.session import Role, SessionContext


def get_token_codec() -> TokenCodec:
    return TokenCodec(
        secret=settings.JWT_SECRET,
        ttl_seconds=settings.SESSION_MAX_AGE_SECONDS,
        algorithm=settings.JWT_ALGORITHM,
    )


def get_current_session(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> SessionContext:
    return resolve_session(request, codec)


def check_role(session: SessionContext, required_role: Role) -> Optional[Forbidden]:
    if session.role != required_role:
        return Forbidden(f"{required_role.value.capitalize()} access required")
    return None


def require_admin(
    session: SessionContext = Depends(get_current_session)
) -> SessionContext:
    error = check_role(session, Role.ADMIN)
    if error:
        raise error
    return session


def scope_to_tenant(session: SessionContext, resource_studio_id: str) -> bool:
    return session.studio_id == resource_studio_id


def session_failure(request: Request) -> Optional[NoSession]:
    """
    The ``NoSession`` a protected route would raise for this request, if any.

    Used when FastAPI rejects the body before ``get_current_session`` runs.
    Honours ``dependency_overrides`` for the token codec.
    """
    if not is_protected_path(request.url.path, settings.PROTECTED_PREFIXES):
        return None

    codec_factory = request.app.dependency_overrides.get(get_token_codec, get_token_codec)
    try:
        resolve_session(request, codec_factory())
    except NoSession as e:
        return e
    return None
