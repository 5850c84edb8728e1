from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl, TypeAdapter
from pydantic.alias_generators import to_camel

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    # validate like HttpUrl, but keep the caller's exact string
    _http_url.validate_python(value)
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python code uses snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EventRef(CamelModel):
    id: str
    title: str
