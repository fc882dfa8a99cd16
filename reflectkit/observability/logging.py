from __future__ import annotations

import logging
import sys
import threading
from typing import Any

import structlog


def _add_thread_name(_: logging.Logger, __: str, event_dict: dict) -> dict:
    # The declared-member cache is shared across threads; tag events with the caller.
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


_CONFIGURED = False


def configure_logging(*, level: str | int | None = None, fmt: str | None = None) -> None:
    """
    Configure stdlib logging + structlog.

    Output goes to stdout as JSON by default; ``fmt="console"`` switches to the
    human-readable renderer. Missing arguments fall back to the environment
    driven settings.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    from ..settings import settings

    level = level or settings.log_level
    fmt = (fmt or settings.log_format).lower()

    pre_chain = [
        _add_thread_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    structlog.configure(
        processors=[
            _add_thread_name,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
