import secrets
import uuid
from enum import Enum

from sqlalchemy import (
    Column, String, Boolean, DateTime, ForeignKey, Text, Enum as SAEnum
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tiri.core.session import Role
from tiri.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _new_access_token() -> str:
    return secrets.token_urlsafe(24)


class TeamRole(str, Enum):
    # descriptive only, no permission is derived from it
    EDITOR = "EDITOR"
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"
    EVENT_PLANNER = "EVENT_PLANNER"
    PHOTO_CREW = "PHOTO_CREW"


class TemplateCategory(str, Enum):
    TRADITIONAL = "TRADITIONAL"
    MODERN = "MODERN"
    RELIGIOUS = "RELIGIOUS"


class GuestCategory(str, Enum):
    GENERAL = "GENERAL"
    BRIDE_GUEST = "BRIDE_GUEST"
    GROOM_GUEST = "GROOM_GUEST"


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


# =====================================================
# STUDIO (tenant boundary)
# =====================================================

class Studio(Base):
    __tablename__ = "studios"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    logo_url = Column(String)
    primary_color = Column(String)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    users = relationship("User", back_populates="studio", cascade="all, delete-orphan")
    events = relationship("Event", back_populates="studio", cascade="all, delete-orphan")


# =====================================================
# USERS
# =====================================================

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    phone = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)

    role = Column(SAEnum(Role, name="user_role"), nullable=False, default=Role.STAFF)
    team_role = Column(SAEnum(TeamRole, name="team_role"), nullable=False, default=TeamRole.EDITOR)

    studio_id = Column(
        String(36),
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    studio = relationship("Studio", back_populates="users")


# =====================================================
# TEMPLATES (global, shared by every studio)
# =====================================================

class Template(Base):
    __tablename__ = "templates"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    category = Column(SAEnum(TemplateCategory, name="template_category"), nullable=False)
    preview_image = Column(String)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # the events.template_id foreign key blocks deleting a template in use
    events = relationship("Event", back_populates="template", passive_deletes="all")


# =====================================================
# EVENTS
# =====================================================

class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_new_id)

    studio_id = Column(
        String(36),
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    template_id = Column(
        String(36),
        ForeignKey("templates.id"),
        nullable=False
    )

    title = Column(String, nullable=False)
    bride_name = Column(String)
    groom_name = Column(String)
    bride_phone = Column(String, nullable=False)
    groom_phone = Column(String, nullable=False)
    couple_access_token = Column(String, unique=True, nullable=False, default=_new_access_token)

    event_date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String)
    description = Column(Text)
    cover_image = Column(String)

    slug = Column(String, unique=True, nullable=False)
    subdomain = Column(String, unique=True)
    is_published = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    studio = relationship("Studio", back_populates="events")
    template = relationship("Template", back_populates="events")
    guests = relationship(
        "Guest",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Guest.created_at.desc()"
    )
    media = relationship(
        "Media",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Media.created_at.desc()"
    )


# =====================================================
# GUESTS
# =====================================================

class Guest(Base):
    __tablename__ = "guests"

    id = Column(String(36), primary_key=True, default=_new_id)

    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String, nullable=False)
    phone = Column(String)
    email = Column(String)
    category = Column(
        SAEnum(GuestCategory, name="guest_category"),
        nullable=False,
        default=GuestCategory.GENERAL
    )
    invitation_code = Column(String, unique=True, nullable=False)

    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="guests")


# =====================================================
# MEDIA
# =====================================================

class Media(Base):
    __tablename__ = "media"

    id = Column(String(36), primary_key=True, default=_new_id)

    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type = Column(SAEnum(MediaType, name="media_type"), nullable=False)
    url = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="media")
