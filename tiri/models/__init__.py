# tiri/models/__init__.py

from .studio import (
    Studio,
    User,
    Template,
    Event,
    Guest,
    Media,
    TeamRole,
    TemplateCategory,
    GuestCategory,
    MediaType
)
