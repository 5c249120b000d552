## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from dataclasses import dataclass
from typing import Iterator

import lark


GRAMMAR = r"""start: _item*
_item: INT | WORD | PLUS | MINUS | STAR | SLASH | INVALID

// TOKENS
INT.2: /[0-9]+/
WORD.2: /[^\W\d_][A-Za-z0-9_]*/
PLUS.2: "+"
MINUS.2: "-"
STAR.2: "*"
SLASH.2: "/"
// Any other single character, reported by the compiler.
INVALID: /./

// WHITESPACE
WS.2: /[ \r\n]+/
%ignore WS
"""


class TokenKind(Enum):
    INT = 'Int'
    TRUE = 'True'
    FALSE = 'False'
    PLUS = 'Plus'
    MINUS = 'Minus'
    STAR = 'Star'
    SLASH = 'Slash'
    DUP = 'Dup'
    DROP = 'Drop'
    OVER = 'Over'
    ROT = 'Rot'
    SWAP = 'Swap'
    PRINTLN = 'PrintLn'
    IDENTIFIER = 'Identifier'    # Reserved for variables and functions, always rejected for now.
    END_OF_INPUT = 'EndOfFile'
    INVALID = 'Error'

    def __str__(self):
        return self.value


KEYWORDS: dict[str, TokenKind] = {
    'dup': TokenKind.DUP,
    'drop': TokenKind.DROP,
    'false': TokenKind.FALSE,
    'over': TokenKind.OVER,
    'println': TokenKind.PRINTLN,
    'rot': TokenKind.ROT,
    'swap': TokenKind.SWAP,
    'true': TokenKind.TRUE,
}

_TERMINALS: dict[str, TokenKind] = {
    'INT': TokenKind.INT,
    'PLUS': TokenKind.PLUS,
    'MINUS': TokenKind.MINUS,
    'STAR': TokenKind.STAR,
    'SLASH': TokenKind.SLASH,
    'INVALID': TokenKind.INVALID,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    line: int
    column: int    # 1-based column of the lexeme's first character.
    length: int

    def __str__(self):
        return (f"Token [ kind: {self.kind}, line: {self.line}, column: {self.column}, "
                f"length: {self.length}, text: '{self.lexeme}' ]")


_LARK = lark.Lark(GRAMMAR, parser='lalr', lexer='basic')


def _make_token(tok: lark.Token) -> Token:
    if tok.type == 'WORD':
        kind = KEYWORDS.get(tok.value, TokenKind.IDENTIFIER)
    else:
        kind = _TERMINALS[tok.type]
    return Token(kind, tok.value, tok.line, tok.column, len(tok.value))


class Scanner:
    """Pull-based tokenizer; each `scan_token()` call returns exactly one token.

    Once the source is exhausted, the same end-of-input token is returned on every call.
    """

    def __init__(self, source: str):
        self.source = source
        self._tokens = _LARK.lex(source)
        self._end: Token | None = None

    def scan_token(self) -> Token:
        if self._end is not None: return self._end
        if (tok := next(self._tokens, None)) is not None:
            return _make_token(tok)

        self._end = Token(TokenKind.END_OF_INPUT, '', *self._end_position(), 0)
        return self._end

    def _end_position(self) -> tuple[int, int]:
        line = self.source.count('\n') + 1
        column = len(self.source) - (self.source.rfind('\n') + 1) + 1
        return line, column

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.scan_token()
            yield token
            if token.kind is TokenKind.END_OF_INPUT: return


def scan(source: str) -> list[Token]:
    """All tokens of `source`, ending with the end-of-input token."""
    return list(Scanner(source))
