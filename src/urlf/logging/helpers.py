from __future__ import annotations

"""Logger naming, output formatting and tracing for urlf.

Records emitted by the pipeline may carry a ``context`` dict (attached via
``extra={'context': ...}``). For failures it is built by `error_context`
from the structured attributes of the FormatError subclasses:

    TemplateSyntaxError   template, state, token, expected
    BindingError          slot, index
    ConfigurationError    field

Both formatters render that context: `JsonLogFormatter` as a nested ``ctx``
object, `TextLogFormatter` as a trailing ``[key=value ...]`` suffix.

The library never configures handlers on import; only the CLI (or an
explicit caller) invokes `setup_base_logger`.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from urlf.constants import ENV_TRACE
from urlf.core.errors import BindingError, ConfigurationError, FormatError, TemplateSyntaxError
from urlf.core.interfaces.logging import LoggerLikeProtocol

BASE_LOGGER = 'urlf'


def error_context(exc: BaseException) -> Dict[str, Any]:
    """Return the structured fields of a urlf error for log records."""
    ctx: Dict[str, Any] = {'error': type(exc).__name__}
    if isinstance(exc, TemplateSyntaxError):
        ctx.update(template=exc.template, state=exc.state, token=exc.token)
        if exc.expected:
            ctx['expected'] = list(exc.expected)
    elif isinstance(exc, BindingError):
        ctx['slot'] = exc.slot
        if exc.index is not None:
            ctx['index'] = exc.index
    elif isinstance(exc, ConfigurationError) and exc.field:
        ctx['field'] = exc.field
    return ctx


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    ctx = getattr(record, 'context', None)
    if isinstance(ctx, dict) and ctx:
        return ctx
    if record.exc_info and isinstance(record.exc_info[1], FormatError):
        return error_context(record.exc_info[1])
    return {}


class JsonLogFormatter(logging.Formatter):
    """Emit one compact JSON object per record.

    Fields: ``ts`` (UTC, milliseconds), ``level``, ``module`` (logger name),
    ``msg``, ``version`` and, when present, ``ctx``.
    """

    def __init__(self) -> None:
        super().__init__()
        # Lazy import, urlf/__init__ imports this module indirectly.
        from urlf import __version__
        self._version = __version__

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            'ts': ts.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'module': record.name,
            'msg': record.getMessage(),
            'version': self._version,
        }
        ctx = _record_context(record)
        if ctx:
            payload['ctx'] = ctx
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextLogFormatter(logging.Formatter):
    """``LEVEL: message [key=value ...]`` lines for terminals."""

    def __init__(self) -> None:
        super().__init__('%(levelname)s: %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        ctx = _record_context(record)
        if not ctx:
            return line
        return f'{line} [{" ".join(f"{k}={v!r}" for k, v in ctx.items())}]'


def setup_base_logger(
    *, json_logs: bool = False, level: int = logging.WARNING, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach (or reconfigure) the single urlf handler on the 'urlf' logger.

    Calling it again swaps the formatter, level and stream instead of
    stacking handlers, so repeated CLI runs in one process stay single-line.
    """
    import sys as _sys

    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(logging.DEBUG if is_trace_enabled() else level)
    base.propagate = False

    handler = next((h for h in base.handlers if getattr(h, '_urlf_handler', False)), None)
    if handler is None:
        handler = logging.StreamHandler(stream or _sys.stderr)
        handler._urlf_handler = True  # type: ignore[attr-defined]
        base.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)
    handler.setFormatter(JsonLogFormatter() if json_logs else TextLogFormatter())
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger of pipeline stage *name* under 'urlf'."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{BASE_LOGGER}.{name}')


def is_trace_enabled() -> bool:
    """True when URLF_TRACE=1 asks for per-token parser tracing."""
    return os.getenv(ENV_TRACE) == '1'


def trace(logger: LoggerLikeProtocol, message: str, **ctx: Any) -> None:
    """Emit a DEBUG trace record with *ctx* attached, only when URLF_TRACE=1."""
    if not is_trace_enabled() or not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug('%s', message, extra={'context': ctx})
