"""
Logging for nativefier.

structlog events are handed to the standard library root logger and rendered
by a single handler on stderr, so our own events, library warnings and
replayed packager output all end up in one stream. On a terminal that handler
is rich; with ``json_logs=True`` (or without a terminal) it writes one JSON
object per line instead.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config

# Third-party loggers that are only interesting when debugging.
CHATTY_LOGGERS = ("httpx", "httpcore", "asyncio")

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
]


def _render_chain(json_logs: bool) -> list[structlog.types.Processor]:
    if json_logs:
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    # RichHandler already prints time and level in its own columns
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=False, pad_event=0),
    ]


def setup_logging(config: Config | None = None, json_logs: bool | None = None) -> None:
    """Route structlog and standard library logging to one stderr handler.

    Safe to call more than once; each call replaces the previous handler.

    Args:
        config: Settings providing the log level; INFO when omitted
        json_logs: Force JSON (True) or console (False) output. Defaults to
            JSON whenever stderr is not a terminal.
    """
    level_name = config.log_level if config else "INFO"
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    if json_logs is None:
        json_logs = not sys.stderr.isatty()

    handler: logging.Handler
    if json_logs:
        # one object per line; rich would wrap long events
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*_PRE_CHAIN, structlog.stdlib.ExtraAdder()],
            processors=_render_chain(json_logs),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Attach key-value pairs to every event logged from this context.

    Args:
        **kwargs: Context key-value pairs to bind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
