"""
My-BASIC CLI Entrypoint.

Features:
    - Start the interactive REPL (no arguments).
    - Load a program file and drop into the REPL with it stored.
    - Load a program file and run it straight away (``--run``), answering
      INPUT statements from stdin.

Example usage:
    mybasic
    mybasic hello.bas
    mybasic hello.bas --run
    mybasic guess.bas --run --input-timeout 30 --verbose

Functions:
    run_file(path, settings, stdin) -> int:
        Load and run a program non-interactively. Returns the process exit code.

    main(argv) -> int:
        Parses CLI arguments and dispatches to the REPL or ``run_file``.
"""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from mybasic.mybasic_config import Settings, configure_logging, parse_timeout
from mybasic.mybasic_errors import BasicError
from mybasic.mybasic_interpreter import Interpreter
from mybasic.mybasic_repl import ConsoleHost, start_repl
from mybasic.mybasic_runner import ProgramRunner

logger = logging.getLogger(__name__)


def load_program(interpreter: Interpreter, path: str) -> bool:
    """Read ``path`` into ``interpreter``'s program store, reporting failures on stderr."""
    try:
        with open(path, encoding="utf-8") as f:
            interpreter.load_source(f.read())
    except OSError as e:
        print(f"mybasic: cannot read {path}: {e.strerror}", file=sys.stderr)
        return False
    except BasicError as e:
        print(f"mybasic: {path}: {e.report()}", file=sys.stderr)
        return False
    return True


async def _run_async(
    interpreter: Interpreter, host: ConsoleHost, settings: Settings, stdin: TextIO
) -> None:
    runner = ProgramRunner(interpreter, input_timeout=settings.input_timeout)
    await runner.submit("RUN")
    while await runner.until_blocked():
        read = asyncio.ensure_future(asyncio.to_thread(stdin.readline))
        assert runner.task is not None
        done, _ = await asyncio.wait(
            {read, runner.task}, return_when=asyncio.FIRST_COMPLETED
        )
        if read not in done:
            # run ended (INPUT timeout) while we were still reading
            read.cancel()
            break
        line = read.result()
        if stdin.isatty():
            host.input_received()
        else:
            host.finish_line()
        if not line:
            runner.stop()
            break
        await runner.submit(line.rstrip("\r\n"))
    await runner.wait()
    host.finish_line()


def run_file(path: str, settings: Settings, stdin: TextIO | None = None) -> int:
    host = ConsoleHost()
    interpreter = Interpreter(host, echo=False)
    if not load_program(interpreter, path):
        return 1
    asyncio.run(_run_async(interpreter, host, settings, stdin or sys.stdin))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mybasic", description="Line-numbered BASIC interpreter"
    )
    parser.add_argument("source", nargs="?", help="Program file to load")
    parser.add_argument(
        "-r", "--run", action="store_true", help="Run the program instead of opening the REPL"
    )
    parser.add_argument(
        "--input-timeout",
        type=parse_timeout,
        metavar="SECONDS",
        help="Stop the program if INPUT waits longer than this (with --run)",
    )
    parser.add_argument("--prompt", help="REPL prompt")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the My-BASIC CLI.

    - No source: launch the REPL.
    - Source without ``--run``: launch the REPL with the program loaded.
    - Source with ``--run``: run it and exit.
    """
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"mybasic: {e}", file=sys.stderr)
        return 2
    settings = settings.override(
        input_timeout=args.input_timeout,
        prompt=args.prompt,
        log_level="DEBUG" if args.verbose else None,
    )
    configure_logging(settings)
    logger.debug("settings: %r", settings)

    if args.source is None:
        start_repl(settings)
        return 0
    if args.run:
        return run_file(args.source, settings)

    host = ConsoleHost()
    interpreter = Interpreter(host, echo=False)
    if not load_program(interpreter, args.source):
        return 1
    start_repl(settings, interpreter=interpreter, host=host)
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
