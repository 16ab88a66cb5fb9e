from __future__ import annotations

"""
formatter – the public formatting pipeline.

    template ─► cache.get_or_parse ─► apply_override ─► substitute ─► compose

`Formatter` wires the pipeline together with injectable collaborators (cache,
parser, substitution engine, composer, logger). Three calling conventions
are offered:

  • format(...)       raises FormatError subclasses.
  • try_format(...)   returns (url, None) or ('', error), never raises them.
  • must_format(...)  for templates known to be valid at write time; any
                      error is logged and turned into SystemExit.
"""

from dataclasses import replace
from typing import Any, NoReturn, Optional, Tuple

from urlf.caching.template_cache import default_cache
from urlf.core.errors import FormatError
from urlf.core.interfaces.cache import TemplateCacheProtocol
from urlf.core.interfaces.composer import UrlComposerProtocol
from urlf.core.interfaces.logging import LoggerLikeProtocol
from urlf.core.models import OverrideOptions, Template, UrlRecord
from urlf.logging.helpers import error_context, get_logger
from urlf.parsing.parser import TemplateParser
from urlf.rendering.composer import UrllibUrlComposer
from urlf.rendering.override import apply_override
from urlf.rendering.substitution import SubstitutionEngine


class Formatter:
    """Reusable URL formatter bound to optional endpoint overrides."""

    def __init__(
        self,
        options: Optional[OverrideOptions] = None,
        *,
        cache: Optional[TemplateCacheProtocol] = None,
        parser: Optional[TemplateParser] = None,
        engine: Optional[SubstitutionEngine] = None,
        composer: Optional[UrlComposerProtocol] = None,
        logger: Optional[LoggerLikeProtocol] = None,
    ) -> None:
        self._log = logger or get_logger('formatter')
        self.options = options or OverrideOptions()
        self._cache: TemplateCacheProtocol = cache if cache is not None else default_cache()
        self._parser = parser or TemplateParser()
        self._engine = engine or SubstitutionEngine()
        self._composer: UrlComposerProtocol = composer or UrllibUrlComposer()

    def __repr__(self) -> str:
        return f'Formatter(options={self.options!r})'

    def parse(self, template: str) -> Template:
        """Return the cached, un-overridden Template for *template*."""
        return self._cache.get_or_parse(template, self._parser.parse)

    def record(self, template: str, *args: Any) -> UrlRecord:
        """Run the pipeline up to (but excluding) serialization."""
        parsed = apply_override(self.parse(template), self.options)
        return self._engine.substitute(parsed, args)

    def format(self, template: str, *args: Any) -> str:
        """Build the URL described by *template* filled with *args*.

        Raises:
            TemplateSyntaxError: the template is structurally invalid.
            BindingError: an argument is missing or of the wrong type.
            ConfigurationError: the override options are inconsistent.
        """
        return self._composer.compose(self.record(template, *args))

    __call__ = format

    def try_format(self, template: str, *args: Any) -> Tuple[str, Optional[FormatError]]:
        """Like `format` but returns ``(url, None)`` or ``('', error)``."""
        try:
            return self.format(template, *args), None
        except FormatError as exc:
            return '', exc

    def must_format(self, template: str, *args: Any) -> str:
        """Like `format` but aborts with SystemExit on any FormatError."""
        try:
            return self.format(template, *args)
        except FormatError as exc:
            self._fatal(template, exc)

    def _fatal(self, template: str, exc: FormatError) -> NoReturn:
        self._log.error('cannot format %r: %s', template, exc, extra={'context': error_context(exc)})
        raise SystemExit(f'urlf: {exc}') from exc


def make_formatter(
    options: Optional[OverrideOptions] = None,
    *,
    cache: Optional[TemplateCacheProtocol] = None,
    composer: Optional[UrlComposerProtocol] = None,
    logger: Optional[LoggerLikeProtocol] = None,
    **fields: Any,
) -> Formatter:
    """Return a Formatter pre-configured with endpoint overrides.

    Override fields may be given as an `OverrideOptions` instance, as
    keywords (``make_formatter(hostname='api.example.com')``) or both, in
    which case keywords win.
    """
    if fields:
        options = replace(options or OverrideOptions(), **fields)
    return Formatter(options, cache=cache, composer=composer, logger=logger)


_DEFAULT_FORMATTER: Optional[Formatter] = None


def default_formatter() -> Formatter:
    global _DEFAULT_FORMATTER
    if _DEFAULT_FORMATTER is None:
        _DEFAULT_FORMATTER = Formatter()
    return _DEFAULT_FORMATTER


def format(template: str, *args: Any) -> str:  # noqa: A001
    return default_formatter().format(template, *args)


def try_format(template: str, *args: Any) -> Tuple[str, Optional[FormatError]]:
    return default_formatter().try_format(template, *args)


def must_format(template: str, *args: Any) -> str:
    return default_formatter().must_format(template, *args)


def parse_template(template: str) -> Template:
    return default_formatter().parse(template)
