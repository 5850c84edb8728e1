import json

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError as SchemaError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tiri.core.config import settings
from tiri.core.errors import Forbidden, NoSession, ValidationError
from tiri.core.logger import logger
from tiri.core.security import hash_password, verify_password
from tiri.core.session import Role, SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session, require_admin, scope_to_tenant
from tiri.models import User
from tiri.schemas.settings import (
    DEFAULT_NOTIFICATION_PREFERENCES,
    AccountOut,
    AccountStudioOut,
    AccountUpdate,
    AccountUserOut,
    NotificationPreferences,
    TeamMemberCreate,
    TeamMemberOut,
    TeamMemberUpdate,
)
from tiri.services.tenant_service import get_studio_member

router = APIRouter(prefix="/api/studio/settings", tags=["Settings"])

# AccountUpdate field -> Studio column
STUDIO_FIELDS = {
    "studio_name": "name",
    "studio_email": "email",
    "studio_phone": "phone",
    "studio_logo_url": "logo_url",
    "studio_primary_color": "primary_color",
}


def _current_user(db: Session, session: SessionContext) -> User:
    user = db.get(User, session.user_id)
    if not user or not scope_to_tenant(session, user.studio_id):
        raise NoSession()
    return user


def _account_out(user: User) -> AccountOut:
    return AccountOut(
        user=AccountUserOut.model_validate(user),
        studio=AccountStudioOut.model_validate(user.studio),
    )


def _phone_taken(db: Session, phone: str, user_id: str) -> bool:
    existing = db.execute(
        select(User.id).where(User.phone == phone)
    ).scalar_one_or_none()
    return existing is not None and existing != user_id


# =====================================================
# ACCOUNT
# =====================================================

@router.get("/account")
def get_account(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return _account_out(_current_user(db, session))


@router.patch("/account")
def update_account(
    payload: AccountUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("new_password") and not changes.get("current_password"):
        raise ValidationError("Current password is required to set a new password")

    user = _current_user(db, session)

    if changes.get("phone") and changes["phone"] != user.phone:
        if _phone_taken(db, changes["phone"], user.id):
            raise ValidationError("Phone is already in use")
        user.phone = changes["phone"]

    if changes.get("new_password"):
        if not verify_password(changes["current_password"], user.password_hash):
            raise ValidationError("Current password is incorrect")
        user.password_hash = hash_password(changes["new_password"])

    studio_changes = {
        column: changes[field] for field, column in STUDIO_FIELDS.items() if field in changes
    }
    if studio_changes and user.role != Role.ADMIN:
        db.rollback()
        raise Forbidden("Admin access required")

    for column, value in studio_changes.items():
        setattr(user.studio, column, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Unable to update account settings")

    db.refresh(user)
    logger.info(f"ACCOUNT UPDATED | user_id={user.id} | studio_fields={sorted(studio_changes)}")
    return _account_out(user)


# =====================================================
# NOTIFICATIONS (kept in a cookie, not in the database)
# =====================================================

def read_preferences(raw_value: str = None) -> NotificationPreferences:
    if not raw_value:
        return DEFAULT_NOTIFICATION_PREFERENCES

    try:
        stored = json.loads(raw_value)
    except ValueError:
        return DEFAULT_NOTIFICATION_PREFERENCES
    if not isinstance(stored, dict):
        return DEFAULT_NOTIFICATION_PREFERENCES

    merged = DEFAULT_NOTIFICATION_PREFERENCES.model_dump(by_alias=True)
    merged.update({key: value for key, value in stored.items() if key in merged})
    try:
        return NotificationPreferences.model_validate(merged)
    except SchemaError:
        return DEFAULT_NOTIFICATION_PREFERENCES


@router.get("/notifications")
def get_notifications(
    request: Request,
    session: SessionContext = Depends(get_current_session),
):
    raw = request.cookies.get(settings.NOTIFICATION_COOKIE_NAME)
    return {"preferences": read_preferences(raw)}


@router.patch("/notifications")
def update_notifications(
    payload: NotificationPreferences,
    response: Response,
    session: SessionContext = Depends(get_current_session),
):
    response.set_cookie(
        key=settings.NOTIFICATION_COOKIE_NAME,
        value=payload.model_dump_json(by_alias=True),
        max_age=settings.NOTIFICATION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return {"preferences": payload}


# =====================================================
# TEAM
# =====================================================

@router.get("/team")
def list_team(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    members = db.execute(
        select(User)
        .where(User.studio_id == session.studio_id)
        .order_by(User.created_at.desc())
    ).scalars().all()
    return {"members": [TeamMemberOut.model_validate(member) for member in members]}


@router.post("/team", status_code=status.HTTP_201_CREATED)
def create_team_member(
    payload: TeamMemberCreate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if _phone_taken(db, payload.phone, user_id=None):
        raise ValidationError("Phone is already in use")

    member = User(
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=Role.STAFF,
        team_role=payload.team_role,
        studio_id=session.studio_id,
    )
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Phone is already in use")
    db.refresh(member)

    logger.info(f"TEAM MEMBER CREATED | user_id={member.id} | studio_id={session.studio_id}")
    return {"member": TeamMemberOut.model_validate(member)}


@router.patch("/team/{user_id}")
def update_team_member(
    user_id: str,
    payload: TeamMemberUpdate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    member = get_studio_member(db, session.studio_id, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if "phone" in changes and changes["phone"] != member.phone:
        if _phone_taken(db, changes["phone"], member.id):
            raise ValidationError("Phone is already in use")
        member.phone = changes["phone"]

    if "team_role" in changes:
        member.team_role = changes["team_role"]

    if "password" in changes:
        member.password_hash = hash_password(changes["password"])

    db.commit()
    db.refresh(member)
    return {"member": TeamMemberOut.model_validate(member)}


@router.delete("/team/{user_id}")
def delete_team_member(
    user_id: str,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if user_id == session.user_id:
        raise ValidationError("You cannot remove your own account")

    member = get_studio_member(db, session.studio_id, user_id)

    db.delete(member)
    db.commit()

    logger.info(f"TEAM MEMBER REMOVED | user_id={user_id} | by={session.user_id}")
    return {"ok": True}
