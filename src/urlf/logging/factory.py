from __future__ import annotations

import logging
from typing import Optional, TextIO

from urlf.core.interfaces.logging import LoggerFactoryProtocol
from urlf.logging.helpers import get_logger, setup_base_logger


class DefaultLoggerFactory(LoggerFactoryProtocol):
    """Configure the 'urlf' logger tree on first use and return stage loggers.

    Quiet by default: only WARNING and above (format failures) are shown.
    `verbose` lowers the threshold to DEBUG so cache, parse and query-set
    merge records appear; URLF_TRACE=1 additionally enables per-token parser
    steps (see `urlf.logging.helpers.trace`).
    """

    def __init__(self, *, json_logs: bool = False, verbose: bool = False, stream: Optional[TextIO] = None) -> None:
        self.json_logs = json_logs
        self.level = logging.DEBUG if verbose else logging.WARNING
        self._stream = stream
        self._configured = False

    def get_logger(self, name: str) -> logging.Logger:
        if not self._configured:
            setup_base_logger(json_logs=self.json_logs, level=self.level, stream=self._stream)
            self._configured = True
        return get_logger(name)
