from __future__ import annotations

"""
Tokenizer – splits a URL template into separators, placeholders and text.

The separator set is closed: '://', '//', ':', '/', '?', '=', '&', '#', '@'.
Multi-character separators are tried before their prefixes so that
'http://' yields ['http', '://'] instead of ['http', ':', '//'].

Each '{}' becomes a placeholder token carrying a zero-based index that
increments per occurrence; that index is the position of the runtime
argument bound to it. Every other run of characters becomes a static token.

Tokenization never fails. Structural problems are reported by the parser.
"""

import re
from typing import List

from urlf.constants import PLACEHOLDER, SEPARATORS
from urlf.core.models import Token, TokenKind


class Tokenizer:
    _SPLIT_RX = re.compile(
        '|'.join(re.escape(s) for s in (*SEPARATORS, PLACEHOLDER))
    )

    @staticmethod
    def tokenize(template: str) -> List[Token]:
        """Return the ordered token list covering *template* without gaps.

        Examples
        --------
        >>> [t.text for t in Tokenizer.tokenize('http://{}/a')]
        ['http', '://', '{}', '/', 'a']
        """
        tokens: List[Token] = []
        pos = 0
        index = 0
        for m in Tokenizer._SPLIT_RX.finditer(template):
            if pos < m.start():
                tokens.append(Token(TokenKind.STATIC, template[pos:m.start()]))
            text = m.group(0)
            if text == PLACEHOLDER:
                tokens.append(Token(TokenKind.PLACEHOLDER, text, index))
                index += 1
            else:
                tokens.append(Token(TokenKind.SEPARATOR, text))
            pos = m.end()
        if pos < len(template):
            tokens.append(Token(TokenKind.STATIC, template[pos:]))
        return tokens


def tokenize(template: str) -> List[Token]:
    """Module-level shortcut for `Tokenizer.tokenize`."""
    return Tokenizer.tokenize(template)
