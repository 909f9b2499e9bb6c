"""Request handlers behind the resource API."""

from .batch import BatchHandler
from .crud import CrudHandler
from .custom import CustomResourceHandler, CustomResourceRegistry
from .links import LinkGraphHandler
from .search import QueryDispatcher, parse_terms
from .types import TypeResolver
from .utilities import run_utility

__all__ = [
    "BatchHandler",
    "CrudHandler",
    "CustomResourceHandler",
    "CustomResourceRegistry",
    "LinkGraphHandler",
    "QueryDispatcher",
    "TypeResolver",
    "parse_terms",
    "run_utility",
]
