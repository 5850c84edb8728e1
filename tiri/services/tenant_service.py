from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from tiri.core.errors import NotFound
from tiri.models import Event, Guest, Media, User


# Every lookup filters on the caller's studio inside the query itself.
# Rows of another studio simply do not come back, so callers answer 404.

def find_studio_event(db: Session, studio_id: str, event_id: str) -> Optional[Event]:
    return db.execute(
        select(Event).where(
            Event.id == event_id,
            Event.studio_id == studio_id
        )
    ).scalar_one_or_none()


def find_studio_guest(db: Session, studio_id: str, guest_id: str) -> Optional[Guest]:
    return db.execute(
        select(Guest)
        .join(Guest.event)
        .where(
            Guest.id == guest_id,
            Event.studio_id == studio_id
        )
    ).scalar_one_or_none()


def find_studio_media(db: Session, studio_id: str, media_id: str) -> Optional[Media]:
    return db.execute(
        select(Media)
        .join(Media.event)
        .where(
            Media.id == media_id,
            Event.studio_id == studio_id
        )
    ).scalar_one_or_none()


def find_studio_member(db: Session, studio_id: str, user_id: str) -> Optional[User]:
    return db.execute(
        select(User).where(
            User.id == user_id,
            User.studio_id == studio_id
        )
    ).scalar_one_or_none()


def get_studio_event(db: Session, studio_id: str, event_id: str) -> Event:
    event = find_studio_event(db, studio_id, str(event_id))
    if not event:
        raise NotFound("Event not found")
    return event


def get_studio_guest(db: Session, studio_id: str, guest_id: str) -> Guest:
    guest = find_studio_guest(db, studio_id, guest_id)
    if not guest:
        raise NotFound("Guest not found")
    return guest


def get_studio_media(db: Session, studio_id: str, media_id: str) -> Media:
    media = find_studio_media(db, studio_id, media_id)
    if not media:
        raise NotFound("Media not found")
    return media


def get_studio_member(db: Session, studio_id: str, user_id: str) -> User:
    member = find_studio_member(db, studio_id, user_id)
    if not member:
        raise NotFound("Team member not found")
    return member
