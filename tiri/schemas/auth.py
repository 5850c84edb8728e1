from typing import Optional

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from tiri.core.session import Role
from tiri.schemas.base import CamelModel


class LoginRequest(BaseModel):
    phone: Annotated[str, Field(min_length=3)]
    password: Annotated[str, Field(min_length=6)]


class SessionUserOut(CamelModel):
    id: str
    phone: str
    role: Role
    studio_id: str


class SessionStudioOut(CamelModel):
    id: str
    name: str


class SessionOut(CamelModel):
    user: SessionUserOut
    studio: Optional[SessionStudioOut]
