from __future__ import annotations

"""
TemplateParser – state machine turning a token list into a `Template`.

States advance in URL order:

    PROTOCOL → HOSTNAME → PORT → PATH → QUERY → QUERY_KEY ⇄ QUERY_VALUE
                                   └──────────→ FRAGMENT → TERMINAL

Each state has a handler `(tokens, cursor) -> (next_state, next_cursor)`
that records slots on a private builder; the token list itself is never
mutated. The handlers enforce where placeholders and separators may appear
and raise `TemplateSyntaxError` naming the offending token, the state and
the accepted alternatives.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from urlf.constants import PORT_MAX, PORT_MIN
from urlf.core.errors import TemplateSyntaxError
from urlf.core.interfaces.logging import LoggerLikeProtocol
from urlf.core.models import QueryEntry, Slot, Template, Token
from urlf.logging.helpers import get_logger, trace
from urlf.parsing.tokenizer import Tokenizer


class ParseState(str, Enum):
    PROTOCOL = 'PROTOCOL'
    HOSTNAME = 'HOSTNAME'
    PORT = 'PORT'
    PATH = 'PATH'
    QUERY = 'QUERY'
    QUERY_KEY = 'QUERY_KEY'
    QUERY_VALUE = 'QUERY_VALUE'
    FRAGMENT = 'FRAGMENT'
    TERMINAL = 'TERMINAL'


_PORT_RX = re.compile(r'[0-9]+')

_TEXT = 'text'
_PARAM = 'placeholder'


@dataclass
class _Builder:
    """Mutable accumulator used during a single parse."""
    template: str
    tokens: Sequence[Token]
    protocol: Optional[Slot] = None
    hostname: Optional[Slot] = None
    port: Optional[Slot] = None
    paths: List[Slot] = field(default_factory=list)
    queries: List[QueryEntry] = field(default_factory=list)
    fragment: Optional[Slot] = None
    query_key: str = ''

    def append_path(self, text: str) -> None:
        # Consecutive literal runs are coalesced into one static segment.
        if self.paths and not self.paths[-1].is_param:
            self.paths[-1] = Slot.static(self.paths[-1].value + text)
        else:
            self.paths.append(Slot.static(text))

    def build(self) -> Template:
        return Template(
            protocol=self.protocol,
            hostname=self.hostname,
            port=self.port,
            paths=tuple(self.paths),
            queries=tuple(self.queries),
            fragment=self.fragment,
            placeholder_count=sum(1 for t in self.tokens if t.is_placeholder),
        )


def _slot_of(tok: Token) -> Slot:
    return Slot.param(tok.index) if tok.is_placeholder else Slot.static(tok.text)


class TemplateParser:
    """Validate and parse URL templates.

    The parser is stateless between calls and therefore safe to share.
    """

    def __init__(self, *, logger: Optional[LoggerLikeProtocol] = None) -> None:
        self._log = logger or get_logger('parser')
        self._handlers: Dict[ParseState, Callable[[_Builder, int], Tuple[ParseState, int]]] = {
            ParseState.PROTOCOL: self._protocol,
            ParseState.HOSTNAME: self._hostname,
            ParseState.PORT: self._port,
            ParseState.PATH: self._path,
            ParseState.QUERY: self._query,
            ParseState.QUERY_KEY: self._query_key,
            ParseState.QUERY_VALUE: self._query_value,
            ParseState.FRAGMENT: self._fragment,
            ParseState.TERMINAL: self._terminal,
        }

    def parse(self, template: str) -> Template:
        """Parse *template* into an immutable Template."""
        tokens = Tokenizer.tokenize(template)
        b = _Builder(template=template, tokens=tokens)
        state = ParseState.PROTOCOL
        cursor = 0
        while cursor < len(tokens):
            trace(self._log, 'parse step', state=state.value, token=tokens[cursor].text)
            state, cursor = self._handlers[state](b, cursor)
        if state is ParseState.QUERY_VALUE:
            # 'key=' at the very end: keep the key with an empty value.
            b.queries.append(QueryEntry(b.query_key, Slot.static('')))
        result = b.build()
        self._log.debug('parsed template %r (%d placeholders)', template, result.placeholder_count)
        return result

    # ------------------------------------------------------------------ #
    #  Error helpers                                                     #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _fail(
        b: _Builder,
        state: ParseState,
        message: str,
        tok: Optional[Token],
        expected: Sequence[str],
    ) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            template=b.template,
            state=state.value,
            token='' if tok is None else tok.text,
            expected=expected,
        )

    @staticmethod
    def _after(b: _Builder, cursor: int) -> str:
        if cursor <= 0:
            return 'start of template'
        return b.tokens[cursor - 1].describe()

    # ------------------------------------------------------------------ #
    #  State handlers                                                    #
    # ------------------------------------------------------------------ #
    def _protocol(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        first = b.tokens[cursor]
        nxt = b.tokens[cursor + 1] if cursor + 1 < len(b.tokens) else None

        if first.is_separator:
            if first.text == '://':
                raise self._fail(b, ParseState.PROTOCOL, 'protocol name should not be empty', first,
                                 (_TEXT, _PARAM))
            if first.text == '//':
                # Protocol-relative URL.
                return ParseState.HOSTNAME, cursor + 1
            if first.text == '/':
                return ParseState.PATH, cursor
            raise self._fail(b, ParseState.PROTOCOL, f'invalid character {first.text!r} at start of template',
                             first, (_TEXT, _PARAM, "'//'", "'/'"))

        if nxt is not None and nxt.is_separator and nxt.text == '://':
            b.protocol = _slot_of(first)
            return ParseState.HOSTNAME, cursor + 2
        return ParseState.PATH, cursor

    def _hostname(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_separator:
            raise self._fail(b, ParseState.HOSTNAME,
                             f'invalid character {tok.text!r} after {self._after(b, cursor)}; hostname expected',
                             tok, (_TEXT, _PARAM))
        b.hostname = _slot_of(tok)
        return ParseState.PORT, cursor + 1

    def _port(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        sep = b.tokens[cursor]
        if not (sep.is_separator and sep.text == ':'):
            return ParseState.PATH, cursor
        if cursor + 1 >= len(b.tokens):
            raise self._fail(b, ParseState.PORT, "port number is expected after ':'", None, ('port number', _PARAM))
        tok = b.tokens[cursor + 1]
        if tok.is_separator:
            raise self._fail(b, ParseState.PORT, f"invalid character {tok.text!r} after ':'; port number expected",
                             tok, ('port number', _PARAM))
        if tok.is_placeholder:
            b.port = Slot.param(tok.index)
        else:
            if not _PORT_RX.fullmatch(tok.text):
                raise self._fail(b, ParseState.PORT, f'port must be a number, got {tok.text!r}',
                                 tok, ('port number', _PARAM))
            number = int(tok.text)
            if not PORT_MIN <= number <= PORT_MAX:
                raise self._fail(b, ParseState.PORT,
                                 f'port number must be in range {PORT_MIN}-{PORT_MAX}, got {number}',
                                 tok, (f'{PORT_MIN}-{PORT_MAX}',))
            b.port = Slot.static(number)
        return ParseState.PATH, cursor + 2

    def _path(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_placeholder:
            raise self._fail(b, ParseState.PATH,
                             f'placeholder {tok.describe()} after {self._after(b, cursor)} must follow a "/"',
                             tok, ("'/'", "'?'", "'#'"))
        if tok.is_static:
            if (b.protocol is not None or b.hostname is not None) and not b.paths:
                raise self._fail(b, ParseState.PATH,
                                 f'invalid text {tok.text!r} after {self._after(b, cursor)}',
                                 tok, ("'/'", "'?'", "'#'"))
            b.append_path(tok.text)
            return ParseState.PATH, cursor + 1

        if tok.text in ('?', '#'):
            return ParseState.QUERY, cursor
        if tok.text != '/':
            raise self._fail(b, ParseState.PATH,
                             f'invalid character {tok.text!r} after {self._after(b, cursor)}',
                             tok, ("'/'", "'?'", "'#'"))

        if cursor + 1 >= len(b.tokens):
            b.append_path('/')
            return ParseState.TERMINAL, cursor + 1
        nxt = b.tokens[cursor + 1]
        if nxt.is_separator:
            b.append_path('/')
            return ParseState.QUERY, cursor + 1
        if nxt.is_placeholder:
            b.append_path('/')
            b.paths.append(Slot.param(nxt.index))
            return ParseState.PATH, cursor + 2
        b.append_path('/' + nxt.text)
        return ParseState.PATH, cursor + 2

    def _query(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_separator and tok.text == '?':
            return ParseState.QUERY_KEY, cursor + 1
        if tok.is_separator and tok.text == '#':
            return ParseState.FRAGMENT, cursor + 1
        raise self._fail(b, ParseState.QUERY,
                         f'invalid token {tok.describe()} after {self._after(b, cursor)}',
                         tok, ("'?'", "'#'"))

    def _query_key(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_separator:
            raise self._fail(b, ParseState.QUERY_KEY,
                             f'query key should be a text or placeholder, got {tok.text!r}',
                             tok, (_TEXT, _PARAM))
        nxt = b.tokens[cursor + 1] if cursor + 1 < len(b.tokens) else None

        if tok.is_placeholder:
            b.queries.append(QueryEntry('', Slot.param(tok.index)))
            if nxt is None:
                return ParseState.TERMINAL, cursor + 1
            if nxt.is_separator and nxt.text == '&':
                return ParseState.QUERY_KEY, cursor + 2
            if nxt.is_separator and nxt.text == '#':
                return ParseState.FRAGMENT, cursor + 2
            raise self._fail(b, ParseState.QUERY_KEY,
                             f'invalid token {nxt.describe()} after query set placeholder {tok.describe()}',
                             nxt, ("'&'", "'#'"))

        if nxt is None:
            b.queries.append(QueryEntry(tok.text, Slot.static('')))
            return ParseState.TERMINAL, cursor + 1
        if nxt.is_separator and nxt.text == '=':
            b.query_key = tok.text
            return ParseState.QUERY_VALUE, cursor + 2
        if nxt.is_separator and nxt.text in ('&', '#'):
            b.queries.append(QueryEntry(tok.text, Slot.static('')))
            state = ParseState.FRAGMENT if nxt.text == '#' else ParseState.QUERY_KEY
            return state, cursor + 2
        raise self._fail(b, ParseState.QUERY_KEY,
                         f'invalid token {nxt.describe()} after query key {tok.text!r}',
                         nxt, ("'='", "'&'", "'#'"))

    def _query_value(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_separator:
            raise self._fail(b, ParseState.QUERY_VALUE,
                             f'query value of {b.query_key!r} should be a text or placeholder, got {tok.text!r}',
                             tok, (_TEXT, _PARAM))
        b.queries.append(QueryEntry(b.query_key, _slot_of(tok)))
        if cursor + 1 >= len(b.tokens):
            return ParseState.TERMINAL, cursor + 1
        nxt = b.tokens[cursor + 1]
        if nxt.is_separator and nxt.text == '&':
            return ParseState.QUERY_KEY, cursor + 2
        if nxt.is_separator and nxt.text == '#':
            return ParseState.FRAGMENT, cursor + 2
        raise self._fail(b, ParseState.QUERY_VALUE,
                         f'invalid token {nxt.describe()} after query value of {b.query_key!r}',
                         nxt, ("'&'", "'#'"))

    def _fragment(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        tok = b.tokens[cursor]
        if tok.is_separator:
            raise self._fail(b, ParseState.FRAGMENT,
                             f'invalid character {tok.text!r} in fragment',
                             tok, (_TEXT, _PARAM))
        b.fragment = _slot_of(tok)
        return ParseState.TERMINAL, cursor + 1

    def _terminal(self, b: _Builder, cursor: int) -> Tuple[ParseState, int]:
        rest = b.tokens[cursor:]
        listing = ', '.join(t.describe() for t in rest)
        raise self._fail(b, ParseState.TERMINAL, f'unexpected extra tokens: [{listing}]', rest[0], ('end of template',))


_DEFAULT_PARSER: Optional[TemplateParser] = None


def parse(template: str) -> Template:
    """Parse *template* with a shared, lazily created parser."""
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = TemplateParser()
    return _DEFAULT_PARSER.parse(template)
