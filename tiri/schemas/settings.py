from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, StringConstraints
from typing_extensions import Annotated

from tiri.core.session import Role
from tiri.models import TeamRole
from tiri.schemas.base import CamelModel, UrlStr

TrimmedPhone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
Password = Annotated[str, Field(min_length=6)]


# =====================================================
# ACCOUNT
# =====================================================

class AccountUpdate(CamelModel):
    phone: TrimmedPhone = None
    current_password: Password = None
    new_password: Password = None

    studio_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)] = None
    studio_email: Optional[EmailStr] = None
    studio_phone: TrimmedPhone = None
    studio_logo_url: Optional[UrlStr] = None
    studio_primary_color: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]] = None


class AccountUserOut(CamelModel):
    id: str
    phone: str
    role: Role


class AccountStudioOut(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None


class AccountOut(CamelModel):
    user: AccountUserOut
    studio: AccountStudioOut


# =====================================================
# NOTIFICATIONS
# =====================================================

class NotificationPreferences(CamelModel):
    rsvp_updates: bool
    check_in_alerts: bool
    draft_reminders: bool
    media_uploads: bool
    weekly_summary: bool


DEFAULT_NOTIFICATION_PREFERENCES = NotificationPreferences(
    rsvp_updates=True,
    check_in_alerts=True,
    draft_reminders=True,
    media_uploads=True,
    weekly_summary=False,
)


# =====================================================
# TEAM
# =====================================================

class TeamMemberCreate(CamelModel):
    phone: TrimmedPhone
    password: Password
    team_role: TeamRole


class TeamMemberUpdate(CamelModel):
    phone: TrimmedPhone = None
    team_role: TeamRole = None
    password: Password = None


class TeamMemberOut(CamelModel):
    id: str
    phone: str
    role: Role
    studio_id: str
    team_role: TeamRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
