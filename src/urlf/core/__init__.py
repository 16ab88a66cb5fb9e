from __future__ import annotations

"""Public surface for urlf.core.

Data model, value union and error taxonomy shared by the parser, the
substitution engine and the formatter:

    from urlf.core import Template, Slot, QuerySet, BindingError, ...
"""

from urlf.core.errors import (
    BindingError,
    ConfigurationError,
    FormatError,
    TemplateSyntaxError,
)
from urlf.core.models import (
    OverrideOptions,
    QueryEntry,
    Slot,
    Template,
    Token,
    TokenKind,
    UrlRecord,
)
from urlf.core.values import QuerySet, ValueKind, classify

__all__ = [
    # Errors
    "FormatError",
    "TemplateSyntaxError",
    "BindingError",
    "ConfigurationError",
    # Models
    "OverrideOptions",
    "QueryEntry",
    "Slot",
    "Template",
    "Token",
    "TokenKind",
    "UrlRecord",
    # Values
    "QuerySet",
    "ValueKind",
    "classify",
]
