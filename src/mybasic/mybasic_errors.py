"""
Fault taxonomy for My-BASIC.

Every fault the interpreter reports to a user is a ``BasicError``. The
``message`` is always uppercase and is what the host shows, formatted by
``BasicError.report()`` as ``?<MESSAGE> IN <line>`` (or ``?<MESSAGE>`` for
faults raised by immediate commands that have no program line).

Classes:
    BasicError: Base class, carries ``message``, optional ``line`` and optional ``detail``.
    LexError: Unterminated string or unexpected character while scanning.
    BasicSyntaxError: Grammar violation, trailing tokens, unknown command, bad GOTO target.
    BasicRuntimeError: Undefined GOTO target, type mismatch, input timeout.
    UsageError: Misuse of the interactive surface (editing while running, bad program file).
"""


class BasicError(Exception):
    """Base class for user-facing interpreter faults."""

    def __init__(
        self, message: str, line: int | None = None, detail: str | None = None
    ) -> None:
        self.message = message.upper()
        self.line = line
        self.detail = detail
        super().__init__(self.message)

    def report(self, line: int | None = None) -> str:
        where = line if line is not None else self.line
        if where is None:
            return f"?{self.message}"
        return f"?{self.message} IN {where}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, line={self.line})"


class LexError(BasicError):
    pass


class BasicSyntaxError(BasicError):
    def __init__(
        self,
        message: str = "SYNTAX ERROR",
        line: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, line, detail)


class BasicRuntimeError(BasicError):
    pass


class UsageError(BasicError):
    pass


__all__ = [
    "BasicError",
    "BasicRuntimeError",
    "BasicSyntaxError",
    "LexError",
    "UsageError",
]
