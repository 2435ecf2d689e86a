"""structlog configuration for koopa.

Log records always go to stderr so stdout stays reserved for the copy
report or the ``--json`` payload.

Two renderers:
- Console (default): key/value lines, colored only on a TTY
- JSON (--log-json): one JSON object per line

The stdlib ``logging`` calls made throughout the package are routed through
the same processor chain, so ``logger.debug("...")`` in a module and a
structlog ``log.debug(...)`` render identically.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "koopa"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool, stream: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Install the koopa log handler on the root logger.

    Safe to call more than once; each call replaces the previous handler.

    Args:
        verbose: Let koopa's own DEBUG and INFO records through.  Otherwise
            only WARNING and above are shown.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Destination for log lines.  Defaults to ``sys.stderr``.
    """
    out = stream if stream is not None else sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, out),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
