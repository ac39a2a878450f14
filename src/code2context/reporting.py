from __future__ import annotations

import time
from typing import TYPE_CHECKING

from code2context.logging import logger as default_logger

if TYPE_CHECKING:
    import structlog


class StructlogProgressReporter:
    """Progress reporter writing to a structlog logger.

    ``start``/``end`` time labelled operations; nested and repeated labels are
    fine as long as every ``start`` is matched by one ``end``.
    """

    def __init__(
        self,
        logger: structlog.BoundLogger | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        self._logger = logger or default_logger
        self._verbose = verbose
        self._started: dict[str, list[float]] = {}

    def start(self, label: str) -> None:
        self._started.setdefault(label, []).append(time.perf_counter())
        self._logger.debug("operation started", operation=label)

    def end(self, label: str) -> None:
        stack = self._started.get(label)
        if not stack:
            self._logger.warning("operation ended without start", operation=label)
            return
        elapsed_ms = (time.perf_counter() - stack.pop()) * 1000
        if not stack:
            del self._started[label]
        self._logger.info("operation finished", operation=label, elapsed_ms=round(elapsed_ms, 2))

    def log(self, message: str) -> None:
        if self._verbose:
            self._logger.info(message)
        else:
            self._logger.debug(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is None:
            self._logger.error(message)
        else:
            self._logger.error(message, exc_info=exc)
