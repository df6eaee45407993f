"""
The narrow contract between the interpreter core and whatever displays its output.

Host:
    Protocol with the three callbacks the interpreter emits.

RecordingHost:
    In-memory host that records every event. Used by the tests and handy for
    embedding the interpreter without a terminal.
"""

from typing import Protocol


class Host(Protocol):
    def on_output_line(self, text: str, append: bool = False) -> None:
        """Show ``text`` as a new line, or append it to the current one."""

    def on_clear_screen(self) -> None:
        """Clear the display."""

    def on_awaiting_input(self, prompt: str) -> None:
        """The interpreter is parked on INPUT until ``deliver_line`` is called."""


class RecordingHost:
    """Keeps the rendered screen as a list of lines plus an event log."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.events: list[tuple[str, str]] = []
        self.prompts: list[str] = []

    def on_output_line(self, text: str, append: bool = False) -> None:
        if append and self.lines:
            self.lines[-1] += text
        else:
            self.lines.append(text)
        self.events.append(("append" if append else "line", text))

    def on_clear_screen(self) -> None:
        self.lines.clear()
        self.events.append(("clear", ""))

    def on_awaiting_input(self, prompt: str) -> None:
        self.prompts.append(prompt)
        self.events.append(("input", prompt))

    @property
    def output(self) -> list[str]:
        """All emitted text in order, ignoring screen clears."""
        return [text for kind, text in self.events if kind in ("line", "append")]


__all__ = ["Host", "RecordingHost"]
