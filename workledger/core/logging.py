"""Logging setup with contextual dimensions.

``logger`` is the application-wide root logger. Call ``with_context`` to get a
child logger that stamps extra dimensions (request id, client id, principal)
onto every record:

    log = logger.with_context(request_id="abc", client_id=str(client_id))
    log.info("Task moved to done")
"""

import logging
import sys
from typing import Any, MutableMapping

from workledger.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s%(dimensions)s"


class _DimensionsFilter(logging.Filter):
    """Render the ``dimensions`` extra as a trailing ``key=value`` suffix."""

    def filter(self, record: logging.LogRecord) -> bool:
        dims = getattr(record, "dimensions", None)
        if isinstance(dims, dict) and dims:
            record.dimensions = " " + " ".join(f"{k}={v}" for k, v in sorted(dims.items()))
        elif not isinstance(dims, str):
            record.dimensions = ""
        return True


class ContextualLogger(logging.LoggerAdapter):
    """LoggerAdapter that carries a dict of dimensions."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None):
        """Wrap *logger* with the given dimensions."""
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Merge the adapter dimensions into the record's extra."""
        extra = dict(kwargs.get("extra") or {})
        dims = {**self.dimensions, **extra.pop("dimensions", {})}
        extra["dimensions"] = dims
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with *dimensions* merged over the current ones."""
        merged = {**self.dimensions, **{k: v for k, v in dimensions.items() if v is not None}}
        return ContextualLogger(self.logger, merged)


def _configure_root(name: str) -> logging.Logger:
    base = logging.getLogger(name)
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(_DimensionsFilter())
        base.addHandler(handler)
    base.setLevel(settings.LOG_LEVEL)
    return base


logger = ContextualLogger(_configure_root("workledger"))
