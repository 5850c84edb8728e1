from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from tiri.core.config import settings
from tiri.core.errors import NoSession
from tiri.core.logger import logger
from tiri.core.security import TokenCodec
from tiri.core.session import SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session, get_token_codec, scope_to_tenant
from tiri.models import User
from tiri.schemas.auth import LoginRequest, SessionOut, SessionStudioOut, SessionUserOut
from tiri.services.auth_service import authenticate

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _session_out(user: User) -> SessionOut:
    return SessionOut(
        user=SessionUserOut.model_validate(user),
        studio=SessionStudioOut.model_validate(user.studio) if user.studio else None,
    )


@router.post("/login", response_model=SessionOut)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    user = authenticate(db, payload.phone, payload.password)

    token = codec.issue(
        user_id=user.id,
        studio_id=user.studio_id,
        role=user.role,
        phone=user.phone,
    )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=codec.ttl_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

    return _session_out(user)


@router.get("/session", response_model=SessionOut)
def get_session(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user = db.get(User, session.user_id)

    # user deleted or moved to another studio since the token was issued
    if not user or not scope_to_tenant(session, user.studio_id):
        raise NoSession()

    return _session_out(user)


@router.post("/logout")
def logout(response: Response):
    # the token itself stays valid until it expires; this browser just drops it
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    logger.info("LOGOUT")
    return {"ok": True}
