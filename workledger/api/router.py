"""Router that serves every route with and without a trailing slash.

FastAPI's built-in slash redirects are disabled in main.py; redirects break
non-GET clients that do not follow 307s with the original body.
"""

from typing import Any, Callable

from fastapi import APIRouter
from fastapi.types import DecoratedCallable


class TrailingSlashRouter(APIRouter):
    """APIRouter that registers ``/path`` and ``/path/`` for each route.

    The slash variant is excluded from the OpenAPI schema.
    """

    def api_route(
        self, path: str, *, include_in_schema: bool = True, **kwargs: Any
    ) -> Callable[[DecoratedCallable], DecoratedCallable]:
        """Register *path* and its trailing-slash alternate."""
        if path.endswith("/") and path != "/":
            path = path.rstrip("/")

        add_primary = super().api_route(path, include_in_schema=include_in_schema, **kwargs)
        add_alternate = (
            None
            if path.endswith("/")
            else super().api_route(path + "/", include_in_schema=False, **kwargs)
        )

        def decorator(func: DecoratedCallable) -> DecoratedCallable:
            if add_alternate is not None:
                add_alternate(func)
            return add_primary(func)

        return decorator
