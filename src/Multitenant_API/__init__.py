"""Request-dispatch core of a multi-tenant object API."""

__version__ = "0.1.0"

__all__ = ["__version__"]
