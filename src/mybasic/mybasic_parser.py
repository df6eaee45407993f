"""
My-BASIC Parser

Parses the token stream of one program line into exactly one statement tree.

Grammar
-------
::

    statement   := PRINT expression
                 | GOTO NUMBER
                 | (LET)? IDENTIFIER EQUAL expression
                 | REM <raw remainder>
                 | CLS
                 | INPUT [expression ("," | ";")]? IDENTIFIER
    expression  := term
    term        := factor (('+' | '-') factor)*
    factor      := primary (('*' | '/') primary)*
    primary     := STRING | NUMBER | IDENTIFIER | '(' expression ')'

Parser Behavior
---------------
- ``+ -`` and ``* /`` are left-associative; ``* /`` bind tighter.
- A line starting with an identifier is an implicit LET.
- The whole token stream must be consumed: anything left after a complete
  statement is a syntax error (``10 PRINT "A" "B"``).

Raises
------
BasicSyntaxError
    With the user-facing message ``SYNTAX ERROR``; the ``detail`` attribute
    says what was expected.
"""

from __future__ import annotations

import logging

from mybasic.mybasic_ast import (
    BinaryExpression,
    ClsStatement,
    Expression,
    GotoStatement,
    GroupingExpression,
    InputStatement,
    LetStatement,
    LiteralExpression,
    PrintStatement,
    RemStatement,
    Statement,
    VariableExpression,
)
from mybasic.mybasic_errors import BasicSyntaxError
from mybasic.mybasic_tokens import Token, TokenType

logger = logging.getLogger(__name__)

_TERM_OPS = {TokenType.PLUS: "+", TokenType.MINUS: "-"}
_FACTOR_OPS = {TokenType.STAR: "*", TokenType.SLASH: "/"}


class Parser:
    """
    Recursive-descent parser for one My-BASIC line.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, normally terminated by EOF.
    position : int
        Current index into the token stream.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.line: int = tokens[0].line if tokens else 0

    def current(self) -> Token:
        return (
            self.tokens[self.position]
            if self.position < len(self.tokens)
            else Token(TokenType.EOF, "", None, self.line)
        )

    def peek(self, offset: int = 1) -> Token:
        index = self.position + offset
        return (
            self.tokens[index]
            if index < len(self.tokens)
            else Token(TokenType.EOF, "", None, self.line)
        )

    def advance(self) -> Token:
        tok = self.current()
        self.position += 1
        return tok

    def check(self, *types: TokenType) -> bool:
        return self.current().type in types

    def error(self, detail: str) -> BasicSyntaxError:
        logger.debug("syntax error on line %s: %s", self.line, detail)
        return BasicSyntaxError(line=self.line, detail=detail)

    def match(self, *types: TokenType) -> Token:
        tok = self.current()
        if tok.type in types:
            return self.advance()
        raise self.error(f"Expected one of {[str(t) for t in types]}, got {tok}")

    def at_end(self) -> bool:
        return self.current().type is TokenType.EOF

    def parse(self) -> Statement:
        """Parse the whole line and return its single statement."""
        statement = self.parse_statement()
        if not self.at_end():
            raise self.error(f"Unexpected trailing token {self.current()}")
        return statement

    def parse_statement(self) -> Statement:
        tok = self.current()
        if tok.type is TokenType.PRINT:
            return self.parse_print()
        if tok.type is TokenType.GOTO:
            return self.parse_goto()
        if tok.type in (TokenType.LET, TokenType.IDENTIFIER):
            return self.parse_let()
        if tok.type is TokenType.REM:
            return self.parse_rem()
        if tok.type is TokenType.CLS:
            self.advance()
            return ClsStatement()
        if tok.type is TokenType.INPUT:
            return self.parse_input()
        raise self.error(f"Unknown statement starting with {tok}")

    def parse_print(self) -> PrintStatement:
        self.match(TokenType.PRINT)
        return PrintStatement(self.parse_expression())

    def parse_goto(self) -> GotoStatement:
        self.match(TokenType.GOTO)
        tok = self.match(TokenType.NUMBER)
        target = tok.literal
        if not isinstance(target, float) or not target.is_integer() or target <= 0:
            raise self.error(f"GOTO target must be a positive line number, got {tok}")
        return GotoStatement(int(target))

    def parse_let(self) -> LetStatement:
        """
        Assignment, with or without the LET keyword:
            LET A = 5
            A$ = "HELLO"
        """
        if self.check(TokenType.LET):
            self.advance()
        var_tok = self.match(TokenType.IDENTIFIER)
        self.match(TokenType.EQUAL)
        return LetStatement(VariableExpression(var_tok.lexeme), self.parse_expression())

    def parse_rem(self) -> RemStatement:
        self.match(TokenType.REM)
        # The lexer hands back the remainder of the line as one STRING token.
        if self.check(TokenType.STRING):
            return RemStatement(str(self.advance().literal))
        return RemStatement("")

    def parse_input(self) -> InputStatement:
        """
        INPUT with an optional prompt expression:
            INPUT A
            INPUT "NAME"; N$
            INPUT "AGE", AGE
        """
        self.match(TokenType.INPUT)
        prompt: Expression | None = None
        is_bare_target = self.check(TokenType.IDENTIFIER) and self.peek().type is TokenType.EOF
        if not is_bare_target:
            prompt = self.parse_expression()
            self.match(TokenType.COMMA, TokenType.SEMICOLON)
        var_tok = self.match(TokenType.IDENTIFIER)
        return InputStatement(prompt, VariableExpression(var_tok.lexeme))

    def parse_expression(self) -> Expression:
        return self.parse_term()

    def parse_term(self) -> Expression:
        expr = self.parse_factor()
        while self.current().type in _TERM_OPS:
            op = _TERM_OPS[self.advance().type]
            expr = BinaryExpression(expr, op, self.parse_factor())  # type: ignore[arg-type]
        return expr

    def parse_factor(self) -> Expression:
        expr = self.parse_primary()
        while self.current().type in _FACTOR_OPS:
            op = _FACTOR_OPS[self.advance().type]
            expr = BinaryExpression(expr, op, self.parse_primary())  # type: ignore[arg-type]
        return expr

    def parse_primary(self) -> Expression:
        tok = self.current()
        if tok.type in (TokenType.STRING, TokenType.NUMBER):
            self.advance()
            return LiteralExpression(tok.literal)  # type: ignore[arg-type]
        if tok.type is TokenType.IDENTIFIER:
            self.advance()
            return VariableExpression(tok.lexeme)
        if tok.type is TokenType.LEFT_PAREN:
            self.advance()
            inner = self.parse_expression()
            self.match(TokenType.RIGHT_PAREN)
            return GroupingExpression(inner)
        raise self.error(f"Expected expression, got {tok}")


def parse_line(tokens: list[Token]) -> Statement:
    return Parser(tokens).parse()


__all__ = ["Parser", "parse_line"]
