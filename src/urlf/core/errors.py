from __future__ import annotations

"""
Error taxonomy for urlf.

    FormatError
    ├── TemplateSyntaxError   raised by the structural parser
    ├── BindingError          raised by the substitution engine
    └── ConfigurationError    raised by the endpoint override / env config

Every error is terminal for the format call in progress: no partial URL is
ever returned. `FormatError` derives from `ValueError` so callers that only
care about "bad input" can catch the builtin.
"""

from typing import Any, Optional, Sequence


class FormatError(ValueError):
    """Base class of every error raised while building a URL."""


class TemplateSyntaxError(FormatError):
    """The template string is structurally invalid.

    Attributes:
        template: The template being parsed.
        state: Parser state name at failure (e.g. 'PORT').
        token: Offending token text ('' when the input ended early).
        expected: Human readable descriptions of what was accepted instead.
    """

    def __init__(
        self,
        message: str,
        *,
        template: str = '',
        state: str = '',
        token: str = '',
        expected: Sequence[str] = (),
    ) -> None:
        self.template = template
        self.state = state
        self.token = token
        self.expected = tuple(expected)
        detail = f'{message} (state={state or "?"}'
        if expected:
            detail += f', expected one of: {", ".join(self.expected)}'
        detail += ')'
        if template:
            detail += f' in template {template!r}'
        super().__init__(detail)


class BindingError(FormatError):
    """A runtime argument cannot be bound to its template slot.

    Attributes:
        slot: Slot name ('protocol', 'hostname', 'port', 'path', 'query:<key>',
            'query-set', 'fragment').
        index: Placeholder index involved, when known.
        value: The offending argument (absent when the argument is missing).
    """

    def __init__(
        self,
        message: str,
        *,
        slot: str,
        index: Optional[int] = None,
        value: Any = None,
    ) -> None:
        self.slot = slot
        self.index = index
        self.value = value
        where = slot if index is None else f'{slot} {{{index}}}'
        super().__init__(f'{where}: {message}')


class ConfigurationError(FormatError):
    """Invalid override options (e.g. username without password)."""

    def __init__(self, message: str, *, field: str = '') -> None:
        self.field = field
        super().__init__(message)


def describe_value(value: Any) -> str:
    """Return a short 'type: repr' description used in error messages."""
    text = repr(value)
    if len(text) > 60:
        text = text[:57] + '...'
    return f'{type(value).__name__} {text}'
