from __future__ import annotations

"""
values – The closed set of runtime argument shapes accepted by urlf.

    str                      STRING
    int (bool excluded)      INTEGER
    None                     NULL      (the "nullable" variant of str/int)
    list / tuple             LIST      (elements: str | int | None)
    QuerySet / Mapping       QUERY_SET (only for query-set placeholders)

Anything else is rejected by `classify` with a BindingError, so the binding
code in `rendering.substitution` only ever dispatches over `ValueKind`.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl

from urlf.core.errors import BindingError, describe_value


class ValueKind(str, Enum):
    STRING = 'string'
    INTEGER = 'integer'
    NULL = 'null'
    LIST = 'list'
    QUERY_SET = 'query-set'


class QuerySet(Dict[str, List[str]]):
    """Ordered multi-valued mapping of query keys to value lists.

    Insertion order of keys is preserved and is the order used when the set
    is merged into a URL.
    """

    def __init__(self, data: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None) -> None:
        super().__init__()
        if data is None:
            return
        pairs = data.items() if isinstance(data, Mapping) else data
        for key, val in pairs:
            if isinstance(val, (list, tuple)):
                for item in val:
                    self.add(key, item)
            else:
                self.add(key, val)

    @classmethod
    def parse(cls, query: str) -> 'QuerySet':
        """Build a set from an encoded query string ('a=1&a=2&b=')."""
        return cls(parse_qsl(query.lstrip('?'), keep_blank_values=True))

    def add(self, key: str, value: Any) -> None:
        if value is None:
            return
        self.setdefault(key, []).append(str(value))

    def set(self, key: str, value: Any) -> None:
        self[key] = [str(value)]

    def pairs(self) -> List[Tuple[str, str]]:
        return [(k, v) for k, vs in self.items() for v in vs]


def classify(value: Any, *, slot: str, index: Optional[int] = None) -> ValueKind:
    """Map *value* onto the closed `ValueKind` union or raise BindingError."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        # bool is an int subclass; 'True' in a URL is almost certainly a bug.
        raise BindingError(f'unsupported value {describe_value(value)}', slot=slot, index=index, value=value)
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, Mapping):
        return ValueKind.QUERY_SET
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    raise BindingError(f'unsupported value {describe_value(value)}', slot=slot, index=index, value=value)


def as_text(value: Union[str, int]) -> str:
    return value if isinstance(value, str) else str(value)
