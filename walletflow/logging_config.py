"""
Log rendering for walletflow.

Controllers and providers log through stdlib ``logging`` and bind their
flow/operation through ``structlog.contextvars``. ``setup_logging`` installs
one handler on the root logger that renders those records with structlog,
merging the bound context into every line.
"""

import logging
import sys
from typing import List, Optional, TextIO

import structlog

from .config import settings


HANDLER_NAME = "walletflow"

QUIET_LOGGERS = ("httpcore", "httpx")


def _resolve_level(log_level: Optional[str]) -> int:
    level = logging.getLevelName((log_level or settings.log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _pre_chain(json_logs: bool) -> List[structlog.types.Processor]:
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Route walletflow logging through structlog.

    Safe to call more than once: a handler installed by an earlier call is
    replaced, handlers owned by anyone else are left alone. Returns the
    installed handler.
    """
    level = _resolve_level(log_level)
    if json_logs is None:
        json_logs = settings.log_json

    pre_chain = _pre_chain(json_logs)
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return handler
