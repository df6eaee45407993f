"""
Token model for the My-BASIC dialect.

Classes:
    TokenType: Enumeration of every token kind the lexer can produce.
    Token: A single lexical token with kind, raw text, literal value and source location.

Constants:
    keywords: Mapping of uppercased reserved words to their token type.
    single_char_tokens: Mapping of one-character operators/punctuation to their token type.

Example:
    >>> Token(TokenType.NUMBER, "42", 42.0, line=10)
    Token(NUMBER, '42', 42.0)
"""

from enum import Enum
from typing import Any


class TokenType(str, Enum):
    """Canonical token kinds.

    Members compare equal to their string names, so ``tok.type == "PRINT"``
    works as well as ``tok.type is TokenType.PRINT``.
    """

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    PRINT = "PRINT"
    GOTO = "GOTO"
    LET = "LET"
    REM = "REM"
    CLS = "CLS"
    LIST = "LIST"
    INPUT = "INPUT"

    IDENTIFIER = "IDENTIFIER"

    # Operators
    EQUAL = "EQUAL"
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"

    # Punctuation
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"

    EOF = "EOF"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenType] = {
    "PRINT": TokenType.PRINT,
    "GOTO": TokenType.GOTO,
    "LET": TokenType.LET,
    "REM": TokenType.REM,
    "CLS": TokenType.CLS,
    "LIST": TokenType.LIST,
    "INPUT": TokenType.INPUT,
}

single_char_tokens: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "=": TokenType.EQUAL,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}


class Token:
    """Represents a single lexical token of a My-BASIC source line.

    Tokens are never mutated after the lexer produces them.

    Attributes:
        type (TokenType): The token's kind.
        lexeme (str): The raw source text of the token (uppercased for words).
        literal (str | float | None): The decoded value for STRING and NUMBER tokens.
        line (int): The program line number the token was scanned from.
        col (int): The 1-based column where the token starts.
    """

    __slots__ = ("type", "lexeme", "literal", "line", "col")

    def __init__(
        self,
        type_: TokenType,
        lexeme: str,
        literal: str | float | None = None,
        line: int = 0,
        col: int = 0,
    ):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "lexeme", lexeme)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable (tried to set {name!r})")

    def __repr__(self) -> str:
        if self.literal is None:
            return f"Token({self.type}, {self.lexeme!r})"
        return f"Token({self.type}, {self.lexeme!r}, {self.literal!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.lexeme == other.lexeme
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.lexeme, self.literal, self.line, self.col))


__all__ = ["Token", "TokenType", "keywords", "single_char_tokens"]
