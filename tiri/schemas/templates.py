from datetime import datetime
from typing import Optional

from pydantic import Field
from typing_extensions import Annotated

from tiri.models import TemplateCategory
from tiri.schemas.base import CamelModel, UrlStr


class TemplateCreate(CamelModel):
    name: Annotated[str, Field(min_length=2)]
    slug: Annotated[str, Field(min_length=2)]
    category: TemplateCategory
    preview_image: Optional[UrlStr] = None
    is_active: Optional[bool] = None


class TemplateUpdate(CamelModel):
    name: Annotated[str, Field(min_length=2)] = None
    slug: Annotated[str, Field(min_length=2)] = None
    category: TemplateCategory = None
    preview_image: Optional[UrlStr] = None
    is_active: bool = None


class TemplateOut(CamelModel):
    id: str
    name: str
    slug: str
    category: TemplateCategory
    preview_image: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateCounts(CamelModel):
    events: int


class TemplateListItem(TemplateOut):
    counts: TemplateCounts = Field(serialization_alias="_count")
