from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    studio_id: str
    role: Role
    phone: str
