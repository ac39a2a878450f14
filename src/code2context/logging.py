from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False
_CONFIGURED_LEVEL: int | None = None


def setup_logging(
    filename: str | Path | None = None,
    level: int | str = logging.INFO,
) -> structlog.BoundLogger:
    """Set up structured logging for the code2context module.

    Only the first call configures handlers; later calls return the same logger,
    except that an explicit ``filename`` or a different ``level`` reconfigures it.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Minimum level, as a logging constant or a name such as ``"DEBUG"``.

    Returns:
        A structlog logger instance configured for the code2context module.
    """
    global _LOGGING_CONFIGURED, _CONFIGURED_LEVEL  # noqa: PLW0603
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)

    if not _LOGGING_CONFIGURED or filename or level != _CONFIGURED_LEVEL:
        handlers: list[logging.Handler] = []
        if filename:
            handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
        else:
            handlers.append(logging.StreamHandler(sys.stderr))

        logging.basicConfig(
            level=level,
            handlers=handlers,
            format="%(message)s",
            force=_LOGGING_CONFIGURED,
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _LOGGING_CONFIGURED = True
        _CONFIGURED_LEVEL = level

    return structlog.get_logger("code2context")


logger = setup_logging()
