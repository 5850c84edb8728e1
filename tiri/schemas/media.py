from datetime import datetime
from typing import Optional
from uuid import UUID

from tiri.models import MediaType
from tiri.schemas.base import CamelModel, EventRef, UrlStr


class MediaCreate(CamelModel):
    event_id: UUID
    type: MediaType
    url: UrlStr


class MediaUpdate(CamelModel):
    type: MediaType = None
    url: UrlStr = None


class MediaOut(CamelModel):
    id: str
    event_id: str
    type: MediaType
    url: str
    created_at: Optional[datetime] = None


class MediaWithEvent(MediaOut):
    event: EventRef
