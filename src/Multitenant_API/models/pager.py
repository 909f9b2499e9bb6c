"""Pagination, sorting and hit-count state threaded through listings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from Multitenant_API.utils.params import to_bool, to_int

from .objects import DomainObject

DEFAULT_LIMIT = 30
DEFAULT_SORT_FIELD = "timestamp"


def sort_key(obj: DomainObject, field: str) -> tuple[int, Any, str]:
    """Order numbers before text and missing values last; ties break on id."""
    value = obj.get(field)
    if value is None:
        return (2, "", obj.id or "")
    if isinstance(value, bool):
        return (1, "true" if value else "false", obj.id or "")
    if isinstance(value, (int, float)):
        return (0, float(value), obj.id or "")
    return (1, str(value), obj.id or "")


class QueryParamsLike(Protocol):
    """Read-only multi-valued parameter mapping (e.g. Starlette ``QueryParams``)."""

    def get(self, key: str, default: str | None = None) -> str | None: ...

    def getlist(self, key: str) -> list[str]: ...

    def __contains__(self, key: object) -> bool: ...


@dataclass(slots=True)
class Pager:
    """Mutable pager created fresh for every call.

    ``count`` is an output slot: whichever operation runs the query writes the
    total number of hits there.
    """

    page: int = 0
    sortby: str | None = None
    desc: bool = True
    limit: int = DEFAULT_LIMIT
    count: int = 0

    @classmethod
    def from_params(
        cls,
        params: QueryParamsLike,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int | None = None,
    ) -> Pager:
        """Build a pager from ``page``, ``sort``, ``desc`` and ``limit``."""
        limit = to_int(params.get("limit"), default_limit)
        if limit < 1:
            limit = default_limit
        if max_limit is not None:
            limit = min(limit, max_limit)
        return cls(
            page=to_int(params.get("page"), 0),
            sortby=params.get("sort") or None,
            desc=to_bool(params.get("desc")) if "desc" in params else True,
            limit=limit,
        )

    @property
    def offset(self) -> int:
        """Index of the first hit; pages 0 and 1 both address the first page."""
        return 0 if self.page < 1 else (self.page - 1) * self.limit

    def paginate(
        self, hits: Sequence[DomainObject], *, presorted: bool = False
    ) -> list[DomainObject]:
        """Sort ``hits`` by ``sortby``, record their number and return one page."""
        if not presorted:
            hits = sorted(
                hits,
                key=lambda obj: sort_key(obj, self.sortby or DEFAULT_SORT_FIELD),
                reverse=self.desc,
            )
        self.count = len(hits)
        return list(hits[self.offset : self.offset + self.limit])
