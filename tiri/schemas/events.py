from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, StringConstraints
from typing_extensions import Annotated

from tiri.schemas.base import CamelModel, UrlStr
from tiri.schemas.guests import GuestOut
from tiri.schemas.media import MediaOut
from tiri.schemas.templates import TemplateOut

PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class EventCreate(CamelModel):
    template_id: UUID
    title: Annotated[str, Field(min_length=2)]
    bride_name: Optional[str] = None
    groom_name: Optional[str] = None
    bride_phone: PhoneStr
    groom_phone: PhoneStr
    event_date: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[UrlStr] = None
    slug: Annotated[str, Field(min_length=2)]
    subdomain: Optional[Annotated[str, Field(min_length=2)]] = None
    is_published: Optional[bool] = None


class EventUpdate(CamelModel):
    template_id: UUID = None
    title: Annotated[str, Field(min_length=2)] = None
    bride_name: Optional[str] = None
    groom_name: Optional[str] = None
    bride_phone: PhoneStr = None
    groom_phone: PhoneStr = None
    event_date: datetime = None
    location: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[UrlStr] = None
    slug: Annotated[str, Field(min_length=2)] = None
    subdomain: Optional[Annotated[str, Field(min_length=2)]] = None
    is_published: bool = None


class EventOut(CamelModel):
    id: str
    studio_id: str
    template_id: str
    title: str
    bride_name: Optional[str] = None
    groom_name: Optional[str] = None
    bride_phone: Optional[str] = None
    groom_phone: Optional[str] = None
    couple_access_token: str
    event_date: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    slug: str
    subdomain: Optional[str] = None
    is_published: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventCounts(CamelModel):
    guests: int
    media: int


class EventListItem(EventOut):
    template: TemplateOut
    counts: EventCounts = Field(serialization_alias="_count")


class EventDetail(EventOut):
    template: TemplateOut
    guests: List[GuestOut]
    media: List[MediaOut]
