"""
Lexical analyzer for the My-BASIC dialect.

This module converts one program line (the text after the line number) into a
token stream:

Classes:
    CharacterStream: Stream abstraction for reading characters with column tracking.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    scan(source, line): Tokenize a whole line, always ending with an EOF token.

Features:
    - Skips spaces, tabs and carriage returns
    - Recognizes:
        * Keywords and identifiers (case-insensitive, optional trailing `$`)
        * Numbers (digit run with an optional fractional part)
        * Strings (double-quoted, no escape sequences)
        * Operators and punctuation: ( ) = + - * / , ;
    - After REM, the raw remainder of the line becomes a single STRING token

Raises:
    LexError: On unterminated strings and unexpected characters.

Example:
    >>> scan('PRINT "HI"', line=10)
    [Token(PRINT, 'PRINT'), Token(STRING, '"HI"', 'HI'), Token(EOF, '')]
"""

import logging

from mybasic.mybasic_errors import LexError
from mybasic.mybasic_tokens import Token, TokenType, keywords, single_char_tokens

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    Reads characters from a single source line with column tracking.

    Attributes:
        source (str): The input line.
        position (int): Current index in the source.
        line (int): Program line number every token from this stream belongs to.
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, line: int = 0, position: int = 0, column: int = 1):
        self.source = source
        self.line = line
        self.position = position
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        self.position += 1
        self.column += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at ``offset`` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def rest(self) -> str:
        """Consumes and returns everything left on the line."""
        remainder = self.source[self.position :]
        self.column += len(remainder)
        self.position = len(self.source)
        return remainder

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


def _is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Lexical analyzer for one My-BASIC line.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self._after_rem = False

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in " \t\r":
            self.advance()

    def _fault(self, message: str, col: int) -> LexError:
        logger.debug(
            "lex fault on line %s col %s: %s (source=%r)",
            self.stream.line,
            col,
            message,
            self.stream.source,
        )
        return LexError(message, line=self.stream.line)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; EOF once the line is exhausted.

        Raises:
            LexError: If an unterminated string or unexpected character is encountered.
        """
        line = self.stream.line

        if self._after_rem:
            self._after_rem = False
            self.skip_whitespace()
            col = self.stream.column
            comment = self.stream.rest()
            return Token(TokenType.STRING, comment, comment, line, col)

        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(TokenType.EOF, "", None, line, self.stream.column)

        ch = self.peek()
        col = self.stream.column

        # 1. Identifier or keyword
        if _is_alpha(ch):
            ident = ""
            while _is_alpha(self.peek()) or _is_digit(self.peek()):
                ident += self.advance()
            if self.peek() == "$":
                ident += self.advance()
            ident = ident.upper()
            kind = keywords.get(ident, TokenType.IDENTIFIER)
            if kind is TokenType.REM:
                self._after_rem = True
            return Token(kind, ident, None, line, col)

        # 2. Number
        if _is_digit(ch):
            num = ""
            while _is_digit(self.peek()):
                num += self.advance()
            if self.peek() == "." and _is_digit(self.peek(1)):
                num += self.advance()
                while _is_digit(self.peek()):
                    num += self.advance()
            return Token(TokenType.NUMBER, num, float(num), line, col)

        # 3. String
        if ch == '"':
            self.advance()
            val = ""
            while not self.stream.end_of_file() and self.peek() != '"':
                val += self.advance()
            if self.stream.end_of_file():
                raise self._fault("UNTERMINATED STRING", col)
            self.advance()
            return Token(TokenType.STRING, f'"{val}"', val, line, col)

        # 4. Operators and punctuation
        if ch in single_char_tokens:
            self.advance()
            return Token(single_char_tokens[ch], ch, None, line, col)

        # 5. Unknown character
        raise self._fault(f"UNEXPECTED CHARACTER '{ch}'", col)


def scan(source: str, line: int = 0) -> list[Token]:
    """Tokenize one program line.

    Args:
        source (str): The code of the line, without its line number.
        line (int): The program line number, stamped on every token.

    Returns:
        list[Token]: The tokens, always terminated by an EOF token.
    """
    lexer = Lexer(CharacterStream(source, line))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type is TokenType.EOF:
            break
    logger.debug("line %s scanned: %r", line, tokens)
    return tokens


__all__ = ["CharacterStream", "Lexer", "scan"]
