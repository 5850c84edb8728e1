from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from tiri.core.errors import ValidationError
from tiri.core.session import SessionContext
from tiri.db.session import get_db
from tiri.dependencies.auth import get_current_session
from tiri.models import Event, Media
from tiri.schemas.media import MediaCreate, MediaOut, MediaUpdate, MediaWithEvent
from tiri.services.tenant_service import get_studio_event, get_studio_media

router = APIRouter(prefix="/api/studio/media", tags=["Media"])

STUDIO_SCOPE_LIMIT = 200


@router.get("")
def list_media(
    event_id: Optional[str] = Query(None, alias="eventId"),
    scope: Optional[str] = Query(None),
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    query = (
        select(Media)
        .join(Media.event)
        .where(Event.studio_id == session.studio_id)
        .order_by(Media.created_at.desc())
    )

    if scope == "studio":
        query = query.limit(STUDIO_SCOPE_LIMIT)
    elif event_id:
        event = get_studio_event(db, session.studio_id, event_id)
        query = query.where(Media.event_id == event.id)
    else:
        raise ValidationError("eventId query param is required, or set scope=studio")

    media = db.execute(query).scalars().all()
    return {"media": [MediaWithEvent.model_validate(item) for item in media]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_media(
    payload: MediaCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    event = get_studio_event(db, session.studio_id, payload.event_id)

    media = Media(event_id=event.id, type=payload.type, url=payload.url)
    db.add(media)
    db.commit()
    db.refresh(media)

    return {"media": MediaOut.model_validate(media)}


@router.get("/{media_id}")
def get_media(
    media_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return {"media": MediaOut.model_validate(get_studio_media(db, session.studio_id, media_id))}


@router.patch("/{media_id}")
def update_media(
    media_id: str,
    payload: MediaUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    media = get_studio_media(db, session.studio_id, media_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(media, field, value)

    db.commit()
    db.refresh(media)
    return {"media": MediaOut.model_validate(media)}


@router.delete("/{media_id}")
def delete_media(
    media_id: str,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    media = get_studio_media(db, session.studio_id, media_id)

    db.delete(media)
    db.commit()
    return {"ok": True}
