"""
My-BASIC Interpreter

Owns the stored program, the parsed-program cache and the variable
environment, and runs programs one statement at a time.

The interpreter is an explicit state machine::

    IDLE --RUN--> COMPILING --ok--> EXECUTING <--deliver_line-- AWAITING_INPUT
      ^               |                 |   \\---INPUT------------^      |
      |---fault-------/                 |                              |
      \\-------end of program / fault / stop()-------------------------/

Nothing here loops on its own. ``step()`` executes exactly one statement and
returns, so the caller decides when to yield to its event loop; see
``mybasic_runner`` for the asyncio driver and ``run_until_blocked()`` for
synchronous callers.

Immediate commands
------------------
``deliver_line(text)`` is the single entry point for user text:

- while AWAITING_INPUT it answers the pending INPUT;
- ``<n> <code>`` stores line n, ``<n>`` alone deletes it;
- ``RUN``, ``LIST``, ``NEW``, ``CLS`` are immediate verbs;
- anything else reports ``?SYNTAX ERROR``.
"""

from __future__ import annotations

import bisect
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum

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
from mybasic.mybasic_env import Environment, Value
from mybasic.mybasic_errors import (
    BasicError,
    BasicRuntimeError,
    BasicSyntaxError,
    UsageError,
)
from mybasic.mybasic_host import Host
from mybasic.mybasic_lexer import scan
from mybasic.mybasic_parser import parse_line

logger = logging.getLogger(__name__)

READY = "Ready"

_PROGRAM_LINE = re.compile(r"^(\d+)\s*(.*)$", re.DOTALL)
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


class InterpreterState(Enum):
    IDLE = "idle"
    COMPILING = "compiling"
    EXECUTING = "executing"
    AWAITING_INPUT = "awaiting_input"


@dataclass(frozen=True)
class PendingInput:
    """Continuation of a suspended INPUT statement."""

    variable: VariableExpression
    line: int
    next_pc: int


def format_value(value: Value) -> str:
    """Stringify a value the way PRINT shows it."""
    if isinstance(value, str):
        return value
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    if float(value).is_integer():
        return str(int(value))
    return repr(value)


def coerce_input(text: str) -> float:
    """Numeric value of typed INPUT text: its leading number, or 0."""
    m = _NUMERIC_PREFIX.match(text)
    return float(m.group(0)) if m else 0.0


def _divide(left: float, right: float) -> float:
    # IEEE-754 semantics instead of ZeroDivisionError
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    """
    Line-numbered BASIC interpreter bound to one host.

    Attributes:
        host (Host): Receives output lines, screen clears and input requests.
        program (dict[int, str]): Stored source lines, by line number.
        parsed_program (dict[int, Statement]): Statements compiled by the last RUN.
        environment (Environment): Variable bindings of the current/last run.
        state (InterpreterState): Where the run state machine currently is.
        echo (bool): Echo delivered command lines as ``><text>`` and INPUT answers.
    """

    def __init__(self, host: Host, echo: bool = True) -> None:
        self.host = host
        self.echo = echo
        self.program: dict[int, str] = {}
        self.parsed_program: dict[int, Statement] = {}
        self.environment = Environment()
        self.state = InterpreterState.IDLE
        self.pending_input: PendingInput | None = None
        self.pc: int = 0
        self._lines: list[int] = []
        self._stop_requested = False
        self._in_step = False
        self._stop_report: str | None = None

    # Host-facing entry point

    @property
    def running(self) -> bool:
        return self.state in (
            InterpreterState.EXECUTING,
            InterpreterState.AWAITING_INPUT,
        )

    @property
    def current_line(self) -> int | None:
        if self.state is InterpreterState.AWAITING_INPUT and self.pending_input:
            return self.pending_input.line
        if self.running and 0 <= self.pc < len(self._lines):
            return self._lines[self.pc]
        return None

    def deliver_line(self, text: str) -> None:
        """Feed one line of user text to the interpreter."""
        if self.state is InterpreterState.AWAITING_INPUT:
            self.submit_input(text)
            return
        if self.echo:
            self.host.on_output_line(f">{text}")
        try:
            self.execute_immediate(text.strip())
        except BasicError as e:
            self.host.on_output_line(e.report())
            if not self.running:
                self.host.on_output_line(READY)

    def execute_immediate(self, code: str) -> None:
        m = _PROGRAM_LINE.match(code)
        if m:
            self.store_line(int(m.group(1)), m.group(2))
            return

        command = code.upper()
        if command == "RUN":
            self.run()
        elif command == "LIST":
            for listing in self.list_program():
                self.host.on_output_line(listing)
            self.host.on_output_line(READY)
        elif command == "CLS":
            self.host.on_clear_screen()
            self.host.on_output_line(READY)
        elif command == "NEW":
            self.new_program()
            self.host.on_output_line(READY)
        else:
            raise BasicSyntaxError(detail=f"Unknown command {code!r}")

    # Program store

    def store_line(self, number: int, code: str) -> None:
        """Store ``code`` as line ``number``, or delete the line when ``code`` is blank."""
        if self.running:
            raise UsageError("CANNOT EDIT WHILE RUNNING")
        if number <= 0:
            raise BasicSyntaxError(detail=f"Line number must be positive, got {number}")
        code = code.strip()
        if code:
            self.program[number] = code
        else:
            self.program.pop(number, None)

    def load_source(self, source: str) -> int:
        """Store every non-blank line of a program text. Returns the number of lines stored."""
        count = 0
        for raw in source.splitlines():
            raw = raw.strip()
            if not raw:
                continue
            m = _PROGRAM_LINE.match(raw)
            if not m or not m.group(2).strip():
                raise UsageError(f"BAD PROGRAM LINE: {raw}")
            self.store_line(int(m.group(1)), m.group(2))
            count += 1
        logger.info("loaded %d program lines", count)
        return count

    def list_program(self) -> list[str]:
        return [f"{number} {self.program[number]}" for number in sorted(self.program)]

    def new_program(self) -> None:
        if self.running:
            raise UsageError("CANNOT EDIT WHILE RUNNING")
        self.program.clear()
        self.parsed_program.clear()
        self.environment.clear()

    # Run state machine

    def compile(self) -> bool:
        """Lex and parse every stored line. Reports the first fault and returns False on failure."""
        self.state = InterpreterState.COMPILING
        self.environment.clear()
        self.parsed_program.clear()
        try:
            for number in sorted(self.program):
                try:
                    self.parsed_program[number] = self._compile_line(number)
                except BasicError as e:
                    logger.debug("compile failed on line %s: %r (%s)", number, e, e.detail)
                    self.host.on_output_line(e.report(number))
                    self.host.on_output_line(READY)
                    return False
        finally:
            self.state = InterpreterState.IDLE
        return True

    def _compile_line(self, number: int) -> Statement:
        try:
            return parse_line(scan(self.program[number], number))
        except RecursionError:
            raise BasicSyntaxError(
                line=number, detail="expression nested too deeply"
            ) from None

    def run(self) -> None:
        """Compile the program and enter EXECUTING. A RUN while running is ignored."""
        if self.state is not InterpreterState.IDLE:
            logger.debug("RUN ignored in state %s", self.state.name)
            return
        if not self.compile():
            return
        self._lines = sorted(self.parsed_program)
        self.pc = 0
        self.pending_input = None
        self._stop_requested = False
        self._stop_report = None
        self.state = InterpreterState.EXECUTING
        logger.info("RUN started with %d lines", len(self._lines))
        if not self._lines:
            self._finish()

    def step(self) -> None:
        """Execute one statement. Does nothing unless EXECUTING."""
        if self.state is not InterpreterState.EXECUTING:
            return
        if self._stop_requested or not (0 <= self.pc < len(self._lines)):
            self._finish()
            return

        number = self._lines[self.pc]
        statement = self.parsed_program[number]
        self._in_step = True
        try:
            jump = self.execute_statement(statement, number)
            if self.state is InterpreterState.AWAITING_INPUT:
                if self._stop_requested:
                    self._finish()
                return
            if jump is None:
                self.pc += 1
            else:
                self.pc = self.resolve_line(jump)
                logger.debug("line %s: jump to %s (pc=%s)", number, jump, self.pc)
        except BasicError as e:
            logger.debug("runtime fault on line %s: %r", number, e)
            self.host.on_output_line(e.report(number))
            self._stop_requested = True
        finally:
            self._in_step = False

        if self._stop_requested or self.pc >= len(self._lines):
            self._finish()

    def run_until_blocked(self, max_steps: int | None = None) -> int:
        """Step until the run ends, suspends on INPUT, or ``max_steps`` statements ran."""
        steps = 0
        while self.state is InterpreterState.EXECUTING:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
        return steps

    def stop(self, message: str | None = "BREAK") -> None:
        """End the current run at the statement boundary.

        Environment and parsed program are left as they are.
        """
        if not self.running:
            return
        line = self.current_line
        self._stop_requested = True
        if message:
            self._stop_report = BasicRuntimeError(message).report(line)
        if self._in_step:
            return
        self._finish()

    def resolve_line(self, target: int) -> int:
        index = bisect.bisect_left(self._lines, target)
        if index == len(self._lines) or self._lines[index] != target:
            raise BasicRuntimeError("UNDEFINED LINE NUMBER")
        return index

    def _finish(self) -> None:
        if self._stop_report is not None:
            self.host.on_output_line(self._stop_report)
            self._stop_report = None
        self.state = InterpreterState.IDLE
        self.pending_input = None
        self._stop_requested = False
        logger.info("RUN finished")
        self.host.on_output_line(READY)

    # INPUT suspension

    def submit_input(self, text: str) -> None:
        """Resolve the pending INPUT with ``text`` and resume EXECUTING."""
        pending = self.pending_input
        if self.state is not InterpreterState.AWAITING_INPUT or pending is None:
            raise UsageError("NOT WAITING FOR INPUT")
        if self.echo:
            self.host.on_output_line(text, append=True)
        value: Value = text if pending.variable.is_string else coerce_input(text)
        self.environment.set(pending.variable.name, value)
        self.pending_input = None
        self.pc = pending.next_pc
        self.state = InterpreterState.EXECUTING
        logger.debug("line %s: INPUT %s = %r", pending.line, pending.variable.name, value)
        if self.pc >= len(self._lines):
            self._finish()

    # Statements and expressions

    def execute_statement(self, statement: Statement, number: int) -> int | None:
        """Run one statement. Returns a line number to jump to, or None to fall through."""
        if isinstance(statement, PrintStatement):
            self.host.on_output_line(format_value(self.evaluate(statement.value)))
            return None
        if isinstance(statement, GotoStatement):
            return statement.target_line
        if isinstance(statement, LetStatement):
            self.environment.set(statement.variable.name, self.evaluate(statement.value))
            return None
        if isinstance(statement, RemStatement):
            return None
        if isinstance(statement, ClsStatement):
            self.host.on_clear_screen()
            return None
        if isinstance(statement, InputStatement):
            prompt = "? "
            if statement.prompt is not None:
                prompt = format_value(self.evaluate(statement.prompt)) + " "
            self.pending_input = PendingInput(statement.variable, number, self.pc + 1)
            self.state = InterpreterState.AWAITING_INPUT
            self.host.on_output_line(prompt)
            self.host.on_awaiting_input(prompt)
            return None
        raise AssertionError(f"unknown statement kind: {statement!r}")

    def evaluate(self, expression: Expression) -> Value:
        if isinstance(expression, LiteralExpression):
            return expression.value
        if isinstance(expression, VariableExpression):
            return self.environment.get(expression.name)
        if isinstance(expression, GroupingExpression):
            return self.evaluate(expression.inner)
        if isinstance(expression, BinaryExpression):
            left = self.evaluate(expression.left)
            right = self.evaluate(expression.right)
            if not isinstance(left, float) or not isinstance(right, float):
                raise BasicRuntimeError("TYPE MISMATCH")
            if expression.operator == "+":
                return left + right
            if expression.operator == "-":
                return left - right
            if expression.operator == "*":
                return left * right
            if expression.operator == "/":
                return _divide(left, right)
            raise AssertionError(f"unknown operator: {expression.operator!r}")
        raise AssertionError(f"unknown expression kind: {expression!r}")


__all__ = [
    "READY",
    "Interpreter",
    "InterpreterState",
    "PendingInput",
    "coerce_input",
    "format_value",
]
