from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tiri.core.errors import ValidationError
from tiri.core.logger import logger
from tiri.core.session import SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session
from tiri.models import Event, Guest, Media, Template
from tiri.schemas.events import (
    EventCounts, EventCreate, EventDetail, EventListItem, EventOut, EventUpdate
)
from tiri.schemas.guests import GuestOut
from tiri.schemas.media import MediaOut
from tiri.schemas.templates import TemplateOut
from tiri.services.tenant_service import get_studio_event

router = APIRouter(prefix="/api/studio/events", tags=["Events"])


def _require_active_template(db: Session, template_id) -> Template:
    template = db.get(Template, str(template_id))
    if not template or not template.is_active:
        raise ValidationError("Template not found or inactive")
    return template


def _commit_event(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Event slug or subdomain is already in use")


@router.get("")
def list_events(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    guest_count = (
        select(func.count(Guest.id))
        .where(Guest.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
    )
    media_count = (
        select(func.count(Media.id))
        .where(Media.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
    )

    rows = db.execute(
        select(Event, guest_count, media_count)
        .where(Event.studio_id == session.studio_id)
        .order_by(Event.created_at.desc())
    ).all()

    return {
        "events": [
            EventListItem(
                **EventOut.model_validate(event).model_dump(),
                template=TemplateOut.model_validate(event.template),
                counts=EventCounts(guests=guests, media=media),
            )
            for event, guests, media in rows
        ]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    _require_active_template(db, payload.template_id)

    event = Event(
        studio_id=session.studio_id,
        template_id=str(payload.template_id),
        title=payload.title,
        bride_name=payload.bride_name,
        groom_name=payload.groom_name,
        bride_phone=payload.bride_phone,
        groom_phone=payload.groom_phone,
        event_date=payload.event_date,
        location=payload.location,
        description=payload.description,
        cover_image=payload.cover_image,
        slug=payload.slug,
        subdomain=payload.subdomain,
        is_published=bool(payload.is_published),
    )
    db.add(event)
    _commit_event(db)
    db.refresh(event)

    logger.info(f"EVENT CREATED | event_id={event.id} | studio_id={session.studio_id}")
    return {"event": EventOut.model_validate(event)}


@router.get("/{event_id}")
def get_event(
    event_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, event_id)

    detail = EventDetail(
        **EventOut.model_validate(event).model_dump(),
        template=TemplateOut.model_validate(event.template),
        guests=[GuestOut.model_validate(guest) for guest in event.guests],
        media=[MediaOut.model_validate(item) for item in event.media],
    )
    return {"event": detail}


@router.patch("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, event_id)

    changes = payload.model_dump(exclude_unset=True)
    if "template_id" in changes:
        _require_active_template(db, changes["template_id"])
        changes["template_id"] = str(changes["template_id"])

    for field, value in changes.items():
        setattr(event, field, value)

    _commit_event(db)
    db.refresh(event)

    return {"event": EventOut.model_validate(event)}


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, event_id)

    db.delete(event)
    db.commit()

    logger.info(f"EVENT DELETED | event_id={event_id} | studio_id={session.studio_id}")
    return {"ok": True}
