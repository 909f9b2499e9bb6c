"""Data models exposed by the API core."""

from .objects import Address, DomainObject, Linker, Sysprop, Tag, Translation, User, Vote
from .pager import Pager, QueryParamsLike, sort_key
from .registry import CORE_MODELS, ObjectTypeRegistry, registry
from .tenant import Tenant

__all__ = [
    "Address",
    "CORE_MODELS",
    "DomainObject",
    "Linker",
    "ObjectTypeRegistry",
    "Pager",
    "QueryParamsLike",
    "Sysprop",
    "Tag",
    "Tenant",
    "Translation",
    "User",
    "Vote",
    "registry",
    "sort_key",
]
