from __future__ import annotations

"""
SubstitutionEngine – bind positional arguments to a parsed Template.

Binding rules per slot:

    protocol, hostname,     str → value, None → slot omitted (a None hostname
    fragment                also drops the scheme)
    port                    int → value, None → omitted; only emitted with a host
    path                    str → appended as a sub-path ('a/b' adds two
                            segments), int → text, None → skipped,
                            list → one segment per non-null element
    query value (key=...)   str/int → appended, None → key removed,
                            list → element 0 overwrites, the rest append
    query set (bare {})     mapping of key → value(s), merged per key with
                            the list rule above

The result is a `UrlRecord`; escaping is the composer's job.
"""

from typing import Any, List, Optional, Sequence

from urlf.constants import PORT_MAX, PORT_MIN
from urlf.core.errors import BindingError, describe_value
from urlf.core.interfaces.logging import LoggerLikeProtocol
from urlf.core.models import Slot, Template, UrlRecord
from urlf.core.values import QuerySet, ValueKind, as_text, classify
from urlf.logging.helpers import get_logger


def join_path(pieces: Sequence[str]) -> str:
    """Concatenate path pieces without producing '//' at the joins."""
    path = ''
    for piece in pieces:
        if path.endswith('/') and piece.startswith('/'):
            path += piece[1:]
        else:
            path += piece
    return path


class SubstitutionEngine:
    def __init__(self, *, logger: Optional[LoggerLikeProtocol] = None) -> None:
        self._log = logger or get_logger('substitution')

    def substitute(self, template: Template, args: Sequence[Any]) -> UrlRecord:
        """Bind *args* to *template* and return the structured URL record.

        Raises:
            BindingError: an argument is missing or has the wrong shape.
        """
        scheme = self._text_slot(template.protocol, args, 'protocol')
        host = self._text_slot(template.hostname, args, 'hostname')
        if template.hostname is not None and template.hostname.is_param and host is None:
            scheme = None
        port = self._port_slot(template.port, args)
        path = join_path(self._path_pieces(template, args))
        query = self._query(template, args)
        fragment = self._text_slot(template.fragment, args, 'fragment')

        return UrlRecord(
            scheme=scheme or '',
            username=template.username,
            password=template.password,
            host=host or '',
            port=port if host else None,
            path=path,
            query=tuple(query.pairs()),
            fragment=fragment or '',
        )

    # ------------------------------------------------------------------ #
    #  Argument access                                                   #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _arg(args: Sequence[Any], index: int, slot: str) -> Any:
        if index >= len(args):
            raise BindingError(f'missing argument (got {len(args)} argument(s))', slot=slot, index=index)
        return args[index]

    # ------------------------------------------------------------------ #
    #  Single-valued slots                                               #
    # ------------------------------------------------------------------ #
    def _text_slot(self, slot: Optional[Slot], args: Sequence[Any], name: str) -> Optional[str]:
        if slot is None:
            return None
        if not slot.is_param:
            return slot.value
        value = self._arg(args, slot.index, name)
        kind = classify(value, slot=name, index=slot.index)
        if kind is ValueKind.STRING:
            return value
        if kind is ValueKind.NULL:
            return None
        raise BindingError(f'expected str or None, got {describe_value(value)}', slot=name, index=slot.index,
                           value=value)

    def _port_slot(self, slot: Optional[Slot], args: Sequence[Any]) -> Optional[int]:
        if slot is None:
            return None
        if not slot.is_param:
            return slot.value
        value = self._arg(args, slot.index, 'port')
        kind = classify(value, slot='port', index=slot.index)
        if kind is ValueKind.NULL:
            return None
        if kind is not ValueKind.INTEGER:
            raise BindingError(f'expected int or None, got {describe_value(value)}', slot='port',
                               index=slot.index, value=value)
        if not PORT_MIN <= value <= PORT_MAX:
            raise BindingError(f'port must be in range {PORT_MIN}-{PORT_MAX}, got {value}', slot='port',
                               index=slot.index, value=value)
        return value

    # ------------------------------------------------------------------ #
    #  Path                                                              #
    # ------------------------------------------------------------------ #
    def _path_pieces(self, template: Template, args: Sequence[Any]) -> List[str]:
        pieces: List[str] = []
        for slot in template.paths:
            if not slot.is_param:
                pieces.append(slot.value)
                continue
            value = self._arg(args, slot.index, 'path')
            kind = classify(value, slot='path', index=slot.index)
            if kind in (ValueKind.STRING, ValueKind.INTEGER):
                pieces.append(as_text(value))
            elif kind is ValueKind.LIST:
                for item in value:
                    item_kind = classify(item, slot='path', index=slot.index)
                    if item_kind is ValueKind.NULL:
                        continue
                    if item_kind not in (ValueKind.STRING, ValueKind.INTEGER):
                        raise BindingError(f'list elements must be str, int or None, got {describe_value(item)}',
                                           slot='path', index=slot.index, value=value)
                    pieces.append('/' + as_text(item))
            elif kind is ValueKind.QUERY_SET:
                raise BindingError(f'expected str, int, None or list, got {describe_value(value)}', slot='path',
                                   index=slot.index, value=value)
        return pieces

    # ------------------------------------------------------------------ #
    #  Query                                                             #
    # ------------------------------------------------------------------ #
    def _query(self, template: Template, args: Sequence[Any]) -> QuerySet:
        query = QuerySet()
        for entry in template.queries:
            if not entry.value.is_param:
                query.add(entry.key, entry.value.value)
                continue
            index = entry.value.index
            if entry.is_query_set:
                self._merge_query_set(query, self._arg(args, index, 'query-set'), index)
            else:
                slot = f'query:{entry.key}'
                self._bind_query_value(query, entry.key, self._arg(args, index, slot), slot, index, append=True)
        return query

    def _bind_query_value(
        self, query: QuerySet, key: str, value: Any, slot: str, index: int, *, append: bool
    ) -> None:
        kind = classify(value, slot=slot, index=index)
        if kind is ValueKind.NULL:
            query.pop(key, None)
        elif kind in (ValueKind.STRING, ValueKind.INTEGER):
            if append:
                query.add(key, as_text(value))
            else:
                query.set(key, as_text(value))
        elif kind is ValueKind.LIST:
            for position, item in enumerate(value):
                item_kind = classify(item, slot=slot, index=index)
                if item_kind is ValueKind.NULL:
                    continue
                if item_kind not in (ValueKind.STRING, ValueKind.INTEGER):
                    raise BindingError(f'list elements must be str, int or None, got {describe_value(item)}',
                                       slot=slot, index=index, value=value)
                # Only element 0 replaces existing values; a null there leaves them in place.
                if position == 0:
                    query.set(key, as_text(item))
                else:
                    query.add(key, as_text(item))
        else:
            raise BindingError(f'expected str, int, None or list, got {describe_value(value)}', slot=slot,
                               index=index, value=value)

    def _merge_query_set(self, query: QuerySet, value: Any, index: int) -> None:
        kind = classify(value, slot='query-set', index=index)
        if kind is not ValueKind.QUERY_SET:
            raise BindingError(f'expected a QuerySet or mapping, got {describe_value(value)}', slot='query-set',
                               index=index, value=value)
        for key, values in value.items():
            if not isinstance(key, str):
                raise BindingError(f'query keys must be str, got {describe_value(key)}', slot='query-set',
                                   index=index, value=value)
            self._bind_query_value(query, key, values, f'query-set:{key}', index, append=False)
        self._log.debug('merged query set {%d} with %d key(s)', index, len(value))
