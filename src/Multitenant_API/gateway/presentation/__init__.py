"""Response shaping, error envelopes and request lifecycle tracking."""

from .dependencies import get_response_presenter
from .errors import ErrorDetail, GatewayError, bad_request, not_found
from .interface import ResponsePresenter
from .lifecycle import RequestLifecycle, RequestLifecycleMiddleware, current_lifecycle
from .presenter import JSONPresenter

__all__ = [
    "ErrorDetail",
    "GatewayError",
    "JSONPresenter",
    "RequestLifecycle",
    "RequestLifecycleMiddleware",
    "ResponsePresenter",
    "bad_request",
    "current_lifecycle",
    "get_response_presenter",
    "not_found",
]
