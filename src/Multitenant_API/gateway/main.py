"""Command line helpers for the resource API.

Key Responsibilities:
    - Export the OpenAPI specification of the REST endpoints
    - Serve the application with Uvicorn

Example:
-------
    >>> python -m Multitenant_API.gateway.main --export-openapi
    >>> python -m Multitenant_API.gateway.main --serve --port 8080

"""

from __future__ import annotations

# ==============================================================================
# IMPORTS
# ==============================================================================

import argparse
from pathlib import Path
from typing import Any

import uvicorn
from yaml import safe_dump

from .app import create_app

# ==============================================================================
# EXPORT FUNCTIONS
# ==============================================================================


def export_openapi() -> str:
    """Export the OpenAPI specification as YAML."""
    app = create_app()
    openapi_schema: dict[str, Any] = app.openapi()
    return safe_dump(openapi_schema, sort_keys=False)


# ==============================================================================
# CLI INTERFACE
# ==============================================================================


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Multitenant API utilities")
    parser.add_argument("--export-openapi", action="store_true", help="Print OpenAPI document")
    parser.add_argument("--output", type=Path, default=None, help="Optional file path to write")
    parser.add_argument("--serve", action="store_true", help="Run the API with Uvicorn")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    if not (args.export_openapi or args.serve):
        parser.error("Choose --export-openapi or --serve")

    if args.serve:
        uvicorn.run(create_app(), host=args.host, port=args.port)
        return

    content = export_openapi()
    if args.output:
        args.output.write_text(content)
    else:
        print(content)


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["export_openapi", "main"]


if __name__ == "__main__":  # pragma: no cover
    main()
