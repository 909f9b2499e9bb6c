"""Stateless helpers served under ``/utils/{method}``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from Multitenant_API.models import QueryParamsLike
from Multitenant_API.utils.identifiers import new_id, timestamp
from Multitenant_API.utils.params import to_int
from Multitenant_API.utils.text import (
    format_message,
    markdown_to_html,
    no_spaces,
    strip_and_trim,
)
from Multitenant_API.utils.time import format_date, time_ago

from ..presentation.errors import bad_request

UtilityFn = Callable[[QueryParamsLike], Any]


def _format_date(params: QueryParamsLike) -> str:
    # 'locale' is accepted for compatibility; dates are always rendered in UTC/C locale
    return format_date(params.get("format"))


UTILITIES: dict[str, UtilityFn] = {
    "newid": lambda params: new_id(),
    "timestamp": lambda params: timestamp(),
    "formatdate": _format_date,
    "formatmessage": lambda params: format_message(
        params.get("message"), params.getlist("fields")
    ),
    "nospaces": lambda params: no_spaces(params.get("string"), params.get("replacement")),
    "nosymbols": lambda params: strip_and_trim(params.get("string")),
    "timeago": lambda params: time_ago(to_int(params.get("delta"), 1)),
    "md2html": lambda params: markdown_to_html(params.get("md")),
}


def run_utility(method: str | None, params: QueryParamsLike) -> Any:
    """Run the helper named by ``method`` (or the ``method`` parameter)."""
    if not method or not method.strip():
        method = params.get("method")
    utility = UTILITIES.get(method or "")
    if utility is None:
        raise bad_request(f"Unknown method: {method or 'empty'}")
    return utility(params)


__all__ = ["UTILITIES", "run_utility"]
