"""
Cache interfaces for urlf.

This module defines a DI-friendly protocol for template caches. The default
implementation lives in `urlf.caching.template_cache`; callers wanting fully
deterministic behavior can inject `NullTemplateCache`.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from urlf.core.models import Template


@runtime_checkable
class TemplateCacheProtocol(Protocol):
    """Contract for template caches keyed by the exact template string.

    Implementations must be safe for concurrent use from several threads and
    must never hand out a partially built Template. Parsing the same template
    twice under a race is acceptable since parsing is deterministic.
    """

    def get_or_parse(self, template: str, parse: Callable[[str], Template]) -> Template:
        """Return the cached Template for *template*, parsing and storing it on a miss."""
        ...
