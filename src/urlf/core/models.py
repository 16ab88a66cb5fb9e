from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TokenKind(str, Enum):
    SEPARATOR = 'separator'
    STATIC = 'static'
    PLACEHOLDER = 'placeholder'


@dataclass(frozen=True)
class Token:
    """One lexical unit of a template.

    `index` is only meaningful for placeholders: it is the zero-based
    position of the argument that will be bound to this token.
    """
    kind: TokenKind
    text: str
    index: int = -1

    @property
    def is_separator(self) -> bool:
        return self.kind is TokenKind.SEPARATOR

    @property
    def is_static(self) -> bool:
        return self.kind is TokenKind.STATIC

    @property
    def is_placeholder(self) -> bool:
        return self.kind is TokenKind.PLACEHOLDER

    def describe(self) -> str:
        if self.is_placeholder:
            return f'{{{self.index}}}'
        return repr(self.text)


@dataclass(frozen=True)
class Slot:
    """A structural position holding either a literal or a placeholder index."""
    value: Any = None
    index: Optional[int] = None

    @classmethod
    def static(cls, value: Any) -> 'Slot':
        return cls(value=value)

    @classmethod
    def param(cls, index: int) -> 'Slot':
        return cls(index=index)

    @property
    def is_param(self) -> bool:
        return self.index is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_param:
            return {'param': self.index}
        return {'static': self.value}


@dataclass(frozen=True)
class QueryEntry:
    """A query slot. An empty key marks a query-set placeholder."""
    key: str
    value: Slot

    @property
    def is_query_set(self) -> bool:
        return self.key == ''


@dataclass(frozen=True)
class Template:
    """Parsed, immutable structural model of a URL template."""
    protocol: Optional[Slot] = None
    hostname: Optional[Slot] = None
    port: Optional[Slot] = None
    paths: Tuple[Slot, ...] = ()
    queries: Tuple[QueryEntry, ...] = ()
    fragment: Optional[Slot] = None
    username: str = ''
    password: str = ''
    placeholder_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view, used by `urlf --parse`. Credentials are masked."""

        def _opt(slot: Optional[Slot]) -> Optional[Dict[str, Any]]:
            return slot.to_dict() if slot is not None else None

        return {
            'protocol': _opt(self.protocol),
            'hostname': _opt(self.hostname),
            'port': _opt(self.port),
            'paths': [p.to_dict() for p in self.paths],
            'queries': [{'key': q.key, **q.value.to_dict()} for q in self.queries],
            'fragment': _opt(self.fragment),
            'credentials': bool(self.username),
            'placeholders': self.placeholder_count,
        }


@dataclass(frozen=True)
class OverrideOptions:
    """Endpoint override applied to a parsed template before substitution.

    `hostname` may embed a scheme and a port ('https://api.example.com:8080').
    Empty strings and a zero/None port mean "not set".
    """
    protocol: Optional[str] = None
    hostname: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.protocol or self.hostname or self.port or self.username or self.password)


@dataclass(frozen=True)
class UrlRecord:
    """Structured URL produced by substitution, serialized by a composer."""
    scheme: str = ''
    username: str = ''
    password: str = ''
    host: str = ''
    port: Optional[int] = None
    path: str = ''
    query: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    fragment: str = ''
