"""
Logging interfaces for urlf.

Every pipeline stage (parser, cache, substitution engine, formatter) accepts
an injected logger typed as `LoggerLikeProtocol`, so callers can hand in a
`logging.Logger`, a `LoggerAdapter` or any test double exposing the same
surface. The CLI obtains its loggers through a `LoggerFactoryProtocol`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LoggerLikeProtocol(Protocol):
    """Subset of `logging.Logger` used by the formatting pipeline.

    `isEnabledFor` lets the parser skip building per-token trace context
    when DEBUG records would be dropped anyway.
    """

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def isEnabledFor(self, level: int) -> bool: ...


@runtime_checkable
class LoggerFactoryProtocol(Protocol):
    """Configures output once and returns loggers under the 'urlf' namespace."""

    def get_logger(self, name: str) -> LoggerLikeProtocol:
        """Return the logger for pipeline stage *name* (e.g. 'parser')."""
        ...
