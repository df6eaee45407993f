import logging
import sys
from typing import TextIO

from mybasic.mybasic_config import Settings
from mybasic.mybasic_interpreter import READY, Interpreter, InterpreterState

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"
STEP_BATCH = 500


class ConsoleHost:
    """Renders interpreter output on a text stream (stdout by default).

    The last line is left open so an INPUT prompt and the user's answer share a line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._open = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def on_output_line(self, text: str, append: bool = False) -> None:
        if not append:
            self.finish_line()
        self.stream.write(text)
        self.stream.flush()
        self._open = True

    def on_clear_screen(self) -> None:
        self.finish_line()
        self.stream.write(CLEAR_SCREEN)
        self.stream.flush()

    def on_awaiting_input(self, prompt: str) -> None:
        self.stream.flush()

    def finish_line(self) -> None:
        if self._open:
            self.stream.write("\n")
            self._open = False

    def input_received(self) -> None:
        # the terminal already moved to a new line when Enter was pressed
        self._open = False


def drive(interpreter: Interpreter, host: ConsoleHost) -> None:
    """Run the program started by RUN until it ends, answering INPUT from stdin.

    Ctrl-C stops the program; end of input stops it and is re-raised.
    """
    while interpreter.running:
        try:
            if interpreter.state is InterpreterState.AWAITING_INPUT:
                text = input()
                host.input_received()
                interpreter.deliver_line(text)
            else:
                interpreter.run_until_blocked(max_steps=STEP_BATCH)
        except KeyboardInterrupt:
            host.finish_line()
            interpreter.stop()
        except EOFError:
            host.finish_line()
            interpreter.stop()
            raise


def start_repl(
    settings: Settings | None = None,
    interpreter: Interpreter | None = None,
    host: ConsoleHost | None = None,
) -> None:
    settings = settings or Settings()
    host = host or ConsoleHost()
    interpreter = interpreter or Interpreter(host, echo=False)
    host.on_output_line(settings.banner)
    host.on_output_line(READY)
    logger.debug("REPL started with %r", settings)

    while True:
        try:
            host.finish_line()
            line = input(settings.prompt)
            host.input_received()
            if line.strip().lower() in ("exit", "quit"):
                print("Exiting My-BASIC.")
                return
            if not line.strip():
                continue
            interpreter.deliver_line(line)
            drive(interpreter, host)
        except (KeyboardInterrupt, EOFError):
            host.finish_line()
            print("\nExiting My-BASIC.")
            break


def main() -> None:
    start_repl(Settings.from_env())


if __name__ == "__main__":
    main()
