"""Observability helpers for the FastAPI application."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ..utils.logging import configure_logging
from .metrics import register_metrics

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from fastapi import FastAPI

    from Multitenant_API.config.settings import AppSettings

__all__ = ["setup_observability"]

logger = structlog.get_logger(__name__)


def setup_observability(app: FastAPI, settings: AppSettings) -> None:
    """Configure logging and metrics for the app."""
    configure_logging(settings=settings.observability.logging)
    register_metrics(app, settings)
    logger.debug(
        "observability.configured",
        service=settings.service_name,
        metrics=settings.observability.metrics.enabled,
    )
