from __future__ import annotations

from urlf.caching.template_cache import NullTemplateCache, TemplateCache, default_cache
from urlf.core.errors import (
    BindingError,
    ConfigurationError,
    FormatError,
    TemplateSyntaxError,
)
from urlf.core.models import OverrideOptions, Template, UrlRecord
from urlf.core.values import QuerySet
from urlf.parsing.parser import TemplateParser
from urlf.rendering.composer import UrllibUrlComposer
from urlf.rendering.formatter import (
    Formatter,
    format,
    make_formatter,
    must_format,
    parse_template,
    try_format,
)

__version__ = '1.0.0'

__all__ = [
    'format',
    'try_format',
    'must_format',
    'make_formatter',
    'parse_template',
    'Formatter',
    'OverrideOptions',
    'QuerySet',
    'Template',
    'UrlRecord',
    'TemplateParser',
    'TemplateCache',
    'NullTemplateCache',
    'default_cache',
    'UrllibUrlComposer',
    'FormatError',
    'TemplateSyntaxError',
    'BindingError',
    'ConfigurationError',
]
