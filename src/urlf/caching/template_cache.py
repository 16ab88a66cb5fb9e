from __future__ import annotations

"""
Template caches.

`TemplateCache` memoizes parsed templates by their exact source string. The
parse itself runs outside the lock: two threads missing on the same template
may both parse it, but only the first result is stored and both callers get
that stored instance. Entries are only ever added whole, so a reader can
never observe a partially constructed Template.

`NullTemplateCache` parses on every call and stores nothing.
"""

import threading
from collections import OrderedDict
from typing import Callable, Optional

from urlf.core.interfaces.cache import TemplateCacheProtocol
from urlf.core.interfaces.logging import LoggerLikeProtocol
from urlf.core.models import Template
from urlf.logging.helpers import get_logger


class TemplateCache(TemplateCacheProtocol):
    """Thread-safe lookup-or-parse store, optionally bounded.

    When *maxsize* is set, the oldest inserted entry is evicted once the store
    is full. Eviction only costs a re-parse.
    """

    def __init__(self, *, maxsize: Optional[int] = None, logger: Optional[LoggerLikeProtocol] = None) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError('maxsize must be a positive integer or None')
        self._maxsize = maxsize
        self._entries: 'OrderedDict[str, Template]' = OrderedDict()
        self._lock = threading.Lock()
        self._log = logger or get_logger('cache')
        self.hits = 0
        self.misses = 0

    def get_or_parse(self, template: str, parse: Callable[[str], Template]) -> Template:
        with self._lock:
            found = self._entries.get(template)
            if found is not None:
                self.hits += 1
                return found
            self.misses += 1

        parsed = parse(template)

        with self._lock:
            stored = self._entries.setdefault(template, parsed)
            if stored is parsed:
                self._log.debug('cached template %r', template)
                if self._maxsize is not None:
                    while len(self._entries) > self._maxsize:
                        evicted, _ = self._entries.popitem(last=False)
                        self._log.debug(
                            'evicted template %r (hits=%d, misses=%d)', evicted, self.hits, self.misses,
                            extra={'context': {'template': evicted, 'hits': self.hits, 'misses': self.misses}},
                        )
        return stored

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, template: object) -> bool:
        with self._lock:
            return template in self._entries


class NullTemplateCache(TemplateCacheProtocol):
    """Cache that never stores anything (deterministic tests, one-off templates)."""

    def get_or_parse(self, template: str, parse: Callable[[str], Template]) -> Template:
        return parse(template)


_DEFAULT_CACHE = TemplateCache()


def default_cache() -> TemplateCache:
    """Return the process-wide cache used by the module-level API."""
    return _DEFAULT_CACHE
