"""Resolution of tenant type aliases to canonical type names."""

from __future__ import annotations

from Multitenant_API.models import ObjectTypeRegistry, Tenant, registry


class TypeResolver:
    """Maps the type segment of a path to the canonical type of a tenant.

    The alias table is the core aliases (``users -> user`` ...) overlaid with
    the tenant's own aliases. Segments without an alias are used verbatim.
    """

    def __init__(self, types: ObjectTypeRegistry | None = None) -> None:
        self._core_aliases = (types or registry).core_aliases()

    def all_types(self, tenant: Tenant) -> dict[str, str]:
        aliases = dict(self._core_aliases)
        aliases.update(tenant.datatypes)
        return aliases

    def resolve(self, tenant: Tenant, segment: str) -> str:
        if segment in tenant.datatypes:
            return tenant.datatypes[segment]
        return self._core_aliases.get(segment, segment)


__all__ = ["TypeResolver"]
