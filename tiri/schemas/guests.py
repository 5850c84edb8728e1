from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field
from typing_extensions import Annotated

from tiri.models import GuestCategory
from tiri.schemas.base import CamelModel, EventRef

CodeStr = Annotated[str, Field(min_length=3)]
NameStr = Annotated[str, Field(min_length=2)]


class GuestCreate(CamelModel):
    event_id: UUID
    name: NameStr
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    category: Optional[GuestCategory] = None
    invitation_code: CodeStr


class BulkGuestRow(CamelModel):
    name: NameStr
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    invitation_code: CodeStr


class BulkGuestCreate(CamelModel):
    event_id: UUID
    guests: Annotated[List[BulkGuestRow], Field(min_length=1)]


class GuestUpdate(CamelModel):
    # omitted means "leave as is"; only phone and email accept null
    name: NameStr = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    category: GuestCategory = None
    invitation_code: CodeStr = None
    checked_in: bool = None


class GuestOut(CamelModel):
    id: str
    event_id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    category: GuestCategory
    invitation_code: str
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class GuestWithEvent(GuestOut):
    event: EventRef
