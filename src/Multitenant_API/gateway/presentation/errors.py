"""Error payload helpers for presentation formatting.

The module defines:
- ErrorDetail: status code and human readable message of a failed call
- GatewayError: exception carrying an ErrorDetail out of a handler

Every error leaves the API as ``{"code": <status>, "message": <text>}``; the
same shape is used for per-item failures inside batch responses.

Thread Safety:
- ErrorDetail instances are immutable and thread-safe
"""

from __future__ import annotations

# IMPORTS
from dataclasses import dataclass
from typing import Any


# DATA MODELS
@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """Structured error metadata.

    Attributes
    ----------
        status: HTTP status code
        message: Human-readable error message

    Examples
    --------
        error = ErrorDetail(status=404, message="Object not found: 42")
        error.as_json()  # {"code": 404, "message": "Object not found: 42"}

    """

    status: int
    message: str

    def as_json(self) -> dict[str, Any]:
        return {"code": self.status, "message": self.message}

    @classmethod
    def bad_request(cls, message: str) -> ErrorDetail:
        return cls(status=400, message=message)

    @classmethod
    def not_found(cls, message: str) -> ErrorDetail:
        return cls(status=404, message=message)


class GatewayError(RuntimeError):
    """Raised by handlers to abort a call with an error envelope."""

    def __init__(self, detail: ErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail

    @property
    def status(self) -> int:
        return self.detail.status


def bad_request(message: str) -> GatewayError:
    return GatewayError(ErrorDetail.bad_request(message))


def not_found(message: str) -> GatewayError:
    return GatewayError(ErrorDetail.not_found(message))


# EXPORTS
__all__ = ["ErrorDetail", "GatewayError", "bad_request", "not_found"]
