"""Dependency providers for presentation layer components."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from .interface import ResponsePresenter
from .presenter import JSONPresenter


@lru_cache(maxsize=None)
def _presenter_for(header_name: str) -> ResponsePresenter:
    return JSONPresenter(correlation_header=header_name)


def get_response_presenter(request: Request) -> ResponsePresenter:
    """Return the presenter configured for the running application."""
    header = request.app.state.settings.observability.logging.correlation_id_header
    return _presenter_for(header or "X-Correlation-ID")


__all__ = ["get_response_presenter"]
