from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tiri.core.errors import ValidationError
from tiri.core.logger import logger
from tiri.models import Event, Guest, GuestCategory
from tiri.schemas.guests import BulkGuestRow, GuestCreate, GuestUpdate


def _commit_or_reject(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(message)


def create_guest(db: Session, event: Event, data: GuestCreate) -> Guest:
    guest = Guest(
        event_id=event.id,
        name=data.name,
        phone=data.phone,
        email=data.email,
        category=data.category or GuestCategory.GENERAL,
        invitation_code=data.invitation_code,
    )
    db.add(guest)
    _commit_or_reject(db, "Invitation code is already in use")
    db.refresh(guest)
    return guest


def bulk_create_guests(db: Session, event: Event, rows: List[BulkGuestRow]) -> List[Guest]:
    """
    Insert every row in one transaction.

    A single conflicting invitation code rolls the whole batch back, no
    partial list is ever persisted.
    """
    guests = [
        Guest(
            event_id=event.id,
            name=row.name,
            phone=row.phone,
            email=row.email,
            invitation_code=row.invitation_code,
        )
        for row in rows
    ]
    db.add_all(guests)
    _commit_or_reject(db, "Invitation code is already in use")

    logger.info(f"GUESTS BULK CREATED | event_id={event.id} | count={len(guests)}")

    for guest in guests:
        db.refresh(guest)
    return guests


def update_guest(db: Session, guest: Guest, data: GuestUpdate) -> Guest:
    changes = data.model_dump(exclude_unset=True)

    if "checked_in" in changes:
        if changes["checked_in"]:
            # keep the first check-in time
            changes["checked_in_at"] = guest.checked_in_at or datetime.now(timezone.utc)
        else:
            changes["checked_in_at"] = None

    for field, value in changes.items():
        setattr(guest, field, value)

    _commit_or_reject(db, "Invitation code is already in use")
    db.refresh(guest)
    return guest


def check_in_guest(db: Session, guest: Guest) -> Guest:
    if not guest.checked_in:
        guest.checked_in = True
        guest.checked_in_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(guest)
    return guest
