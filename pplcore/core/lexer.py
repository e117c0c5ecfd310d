"""Tokenizer for the pplcore modelling language."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from ..errors import LexError


class TokenKind(Enum):
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    EQUAL = "EQUAL"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COMMA = "COMMA"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexed token. `position` is the offset in the source and is ignored by ==."""

    kind: TokenKind
    value: Union[str, float, None] = None
    position: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}({self.value!r})"


_PUNCTUATION = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQUAL,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


def _is_digit(char: str) -> bool:
    return len(char) == 1 and char in "0123456789"


def _is_ident_start(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ident_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


class Lexer:
    """
    Converts source text into a list of tokens.

    `sample` and `observe` come out as ordinary identifiers; the interpreter
    decides what they mean. Whitespace and `#` comments are skipped.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def tokenize(self) -> List[Token]:
        """Tokenize the whole source. Restartable: each call starts from offset 0."""
        self.position = 0
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind is TokenKind.EOF:
                return tokens

    def next_token(self) -> Token:
        self._skip_ignored()
        if self.position >= len(self.source):
            return Token(TokenKind.EOF, None, self.position)

        char = self.source[self.position]
        if _is_ident_start(char):
            return self._read_identifier()
        if _is_digit(char) or (char == "." and _is_digit(self._peek(1))):
            return self._read_number()
        if char in _PUNCTUATION:
            start = self.position
            self.position += 1
            return Token(_PUNCTUATION[char], char, start)

        self._fail(self.position)

    def _peek(self, offset: int = 0) -> str:
        index = self.position + offset
        return self.source[index] if index < len(self.source) else ""

    def _skip_ignored(self):
        while self.position < len(self.source):
            char = self.source[self.position]
            if char.isspace():
                self.position += 1
            elif char == "#":
                while self.position < len(self.source) and self.source[self.position] != "\n":
                    self.position += 1
            else:
                break

    def _read_identifier(self) -> Token:
        start = self.position
        while self.position < len(self.source) and _is_ident_char(self.source[self.position]):
            self.position += 1
        return Token(TokenKind.IDENTIFIER, self.source[start:self.position], start)

    def _read_number(self) -> Token:
        start = self.position
        while _is_digit(self._peek()):
            self.position += 1
        if self._peek() == ".":
            if not _is_digit(self._peek(1)):
                self._fail(self.position)
            self.position += 1
            while _is_digit(self._peek()):
                self.position += 1
        return Token(TokenKind.NUMBER, float(self.source[start:self.position]), start)

    def _fail(self, position: int):
        line = self.source.count("\n", 0, position) + 1
        column = position - (self.source.rfind("\n", 0, position) + 1) + 1
        raise LexError(self.source[position], position, line, column)


def tokenize(source: str) -> List[Token]:
    """Tokenize `source`, ending with an EOF token. Raises LexError."""
    return Lexer(source).tokenize()
