"""Registry of object shapes keyed by canonical type name."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from Multitenant_API.utils.text import pluralize

from .objects import Address, DomainObject, Linker, Sysprop, Tag, Translation, User, Vote
from .tenant import Tenant

CORE_MODELS: Mapping[str, type[DomainObject]] = {
    "user": User,
    "app": Tenant,
    "tag": Tag,
    "address": Address,
    "vote": Vote,
    "translation": Translation,
    "sysprop": Sysprop,
    "linker": Linker,
}


class ObjectTypeRegistry:
    """Maps canonical type names to the model validating their payloads.

    Types without a registered model fall back to :class:`DomainObject`.
    """

    def __init__(self, models: Mapping[str, type[DomainObject]] | None = None) -> None:
        self._models: dict[str, type[DomainObject]] = dict(CORE_MODELS)
        self._core = frozenset(self._models)
        self._models.update(models or {})

    def register(self, type_name: str, model: type[DomainObject]) -> None:
        if type_name in self._core:
            raise ValueError(f"Core type '{type_name}' cannot be redefined")
        self._models[type_name] = model

    def model_for(self, type_name: str | None) -> type[DomainObject]:
        if not type_name:
            return DomainObject
        return self._models.get(type_name, DomainObject)

    def build(self, payload: Mapping[str, Any]) -> DomainObject:
        """Validate ``payload`` against the model of its ``type`` field.

        Raises:
            pydantic.ValidationError: When the payload does not fit the model.
        """
        model = self.model_for(payload.get("type") if isinstance(payload.get("type"), str) else None)
        return model.model_validate(dict(payload))

    def is_core(self, type_name: str) -> bool:
        return type_name in self._core

    def core_aliases(self) -> dict[str, str]:
        """Return ``plural -> singular`` aliases of the core types."""
        return {pluralize(name): name for name in self._core}

    def registered(self) -> Iterable[str]:
        return sorted(self._models)


registry = ObjectTypeRegistry()
