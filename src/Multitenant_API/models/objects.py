"""Domain object models persisted and indexed on behalf of tenants.

Every tenant object is a :class:`DomainObject`: a small set of common fields
plus an open set of tenant-defined properties carried as pydantic extras.
Core types refine the shape with their own required fields.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class DomainObject(BaseModel):
    """Base shape shared by every stored object."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    type: str
    appid: str | None = None
    name: str | None = None
    timestamp: int | None = None
    updated: int | None = None
    parentid: str | None = None
    creatorid: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("id", "parentid", "creatorid", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("identifiers must be strings")
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("type")
    @classmethod
    def _validate_type(cls, value: str) -> str:
        value = value.strip()
        if not _TYPE_PATTERN.match(value):
            raise ValueError(f"Invalid type '{value}'")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    def get(self, field: str, default: Any = None) -> Any:
        """Return a declared or tenant-defined property."""
        if field in type(self).model_fields:
            return getattr(self, field)
        return (self.model_extra or {}).get(field, default)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON representation sent to clients."""
        return self.model_dump(mode="json")


class User(DomainObject):
    type: str = "user"
    email: str
    identifier: str | None = None
    groups: str = "users"
    active: bool = True

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value.strip().lower()


class Tag(DomainObject):
    type: str = "tag"
    tag: str
    count: int = 0


class Address(DomainObject):
    type: str = "address"
    address: str
    latlng: str

    @field_validator("latlng")
    @classmethod
    def _validate_latlng(cls, value: str) -> str:
        lat, sep, lng = value.partition(",")
        if not sep:
            raise ValueError("latlng must be 'lat,lng'")
        float(lat)
        float(lng)
        return value


class Vote(DomainObject):
    type: str = "vote"
    value: int = 0


class Translation(DomainObject):
    type: str = "translation"
    locale: str
    thekey: str
    value: str = ""


class Sysprop(DomainObject):
    type: str = "sysprop"
    properties: dict[str, Any] = Field(default_factory=dict)


class Linker(DomainObject):
    """Persisted edge between two objects of a tenant."""

    type: str = "linker"
    id1: str
    id2: str
    type1: str
    type2: str

    def other(self, object_id: str) -> str:
        """Return the endpoint opposite to ``object_id``."""
        return self.id2 if self.id1 == object_id else self.id1
