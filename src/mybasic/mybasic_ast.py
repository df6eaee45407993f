"""
Defines the abstract syntax tree (AST) for the My-BASIC dialect.

The tree is a closed set of immutable variants. Every node is a frozen
dataclass; the ``Statement`` and ``Expression`` unions list every variant
the parser can produce, and the interpreter dispatches over exactly those.

Statements:
    PrintStatement(value)
    GotoStatement(target_line)
    LetStatement(variable, value)
    RemStatement(comment)
    ClsStatement()
    InputStatement(prompt, variable)

Expressions:
    LiteralExpression(value)
    VariableExpression(name)
    BinaryExpression(left, operator, right)
    GroupingExpression(inner)

Each node can be serialized with ``to_dict()`` for debugging and tests.

Example:
    LetStatement(VariableExpression("A"), LiteralExpression(5.0))
"""

from dataclasses import dataclass, fields
from typing import Any, Literal, Union

BinaryOperator = Literal["+", "-", "*", "/"]


class ASTNode:
    """Common behaviour of all tree nodes."""

    kind: str = "node"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            val = getattr(self, f.name)
            out[f.name] = val.to_dict() if isinstance(val, ASTNode) else val
        return out


# Expressions


@dataclass(frozen=True)
class LiteralExpression(ASTNode):
    value: str | float
    kind = "literal"


@dataclass(frozen=True)
class VariableExpression(ASTNode):
    name: str
    kind = "variable"

    @property
    def is_string(self) -> bool:
        return self.name.endswith("$")


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    left: "Expression"
    operator: BinaryOperator
    right: "Expression"
    kind = "binary"


@dataclass(frozen=True)
class GroupingExpression(ASTNode):
    inner: "Expression"
    kind = "grouping"


Expression = Union[
    LiteralExpression, VariableExpression, BinaryExpression, GroupingExpression
]


# Statements


@dataclass(frozen=True)
class PrintStatement(ASTNode):
    value: Expression
    kind = "print"


@dataclass(frozen=True)
class GotoStatement(ASTNode):
    target_line: int
    kind = "goto"


@dataclass(frozen=True)
class LetStatement(ASTNode):
    variable: VariableExpression
    value: Expression
    kind = "let"


@dataclass(frozen=True)
class RemStatement(ASTNode):
    comment: str = ""
    kind = "rem"


@dataclass(frozen=True)
class ClsStatement(ASTNode):
    kind = "cls"


@dataclass(frozen=True)
class InputStatement(ASTNode):
    prompt: Expression | None
    variable: VariableExpression
    kind = "input"


Statement = Union[
    PrintStatement,
    GotoStatement,
    LetStatement,
    RemStatement,
    ClsStatement,
    InputStatement,
]


__all__ = [
    "ASTNode",
    "BinaryExpression",
    "BinaryOperator",
    "ClsStatement",
    "Expression",
    "GotoStatement",
    "GroupingExpression",
    "InputStatement",
    "LetStatement",
    "LiteralExpression",
    "PrintStatement",
    "RemStatement",
    "Statement",
    "VariableExpression",
]
