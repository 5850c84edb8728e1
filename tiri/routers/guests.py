from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from tiri.core.errors import ValidationError
from tiri.core.session import SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session
from tiri.models import Event, Guest
from tiri.schemas.guests import (
    BulkGuestCreate, GuestCreate, GuestOut, GuestUpdate, GuestWithEvent
)
from tiri.services.guest_service import (
    bulk_create_guests, check_in_guest, create_guest, update_guest
)
from tiri.services.tenant_service import get_studio_event, get_studio_guest

router = APIRouter(prefix="/api/studio/guests", tags=["Guests"])

STUDIO_SCOPE_LIMIT = 100


@router.get("")
def list_guests(
    event_id: Optional[str] = Query(None, alias="eventId"),
    scope: Optional[str] = Query(None),
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    if scope == "studio":
        guests = db.execute(
            select(Guest)
            .join(Guest.event)
            .where(Event.studio_id == session.studio_id)
            .order_by(Guest.created_at.desc())
            .limit(STUDIO_SCOPE_LIMIT)
        ).scalars().all()
        return {"guests": [GuestWithEvent.model_validate(guest) for guest in guests]}

    if not event_id:
        raise ValidationError("eventId query param is required, or set scope=studio")

    event = get_studio_event(db, session.studio_id, event_id)

    guests = db.execute(
        select(Guest)
        .where(Guest.event_id == event.id)
        .order_by(Guest.created_at.desc())
    ).scalars().all()
    return {"guests": [GuestOut.model_validate(guest) for guest in guests]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_guest_endpoint(
    payload: GuestCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, payload.event_id)
    guest = create_guest(db, event, payload)
    return {"guest": GuestOut.model_validate(guest)}


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
def bulk_create_guests_endpoint(
    payload: BulkGuestCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, payload.event_id)
    guests = bulk_create_guests(db, event, payload.guests)
    return {"guests": [GuestOut.model_validate(guest) for guest in guests]}


@router.get("/{guest_id}")
def get_guest(
    guest_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return {"guest": GuestOut.model_validate(get_studio_guest(db, session.studio_id, guest_id))}


@router.patch("/{guest_id}")
def update_guest_endpoint(
    guest_id: str,
    payload: GuestUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    guest = get_studio_guest(db, session.studio_id, guest_id)
    return {"guest": GuestOut.model_validate(update_guest(db, guest, payload))}


@router.patch("/{guest_id}/check-in")
def check_in(
    guest_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    guest = get_studio_guest(db, session.studio_id, guest_id)
    return {"guest": GuestOut.model_validate(check_in_guest(db, guest))}


@router.delete("/{guest_id}")
def delete_guest(
    guest_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    guest = get_studio_guest(db, session.studio_id, guest_id)

    db.delete(guest)
    db.commit()
    return {"ok": True}
