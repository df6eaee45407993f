"""
Asyncio driver for the interpreter.

``ProgramRunner`` steps a running program from an event loop, yielding with
``await asyncio.sleep(0)`` after every statement so the host can render and
process other events (including a stop request) even while an infinite
``GOTO`` loop runs. When the program reaches INPUT the runner parks on an
``asyncio.Event`` until ``submit()`` delivers the answer, optionally giving
up after ``input_timeout`` seconds.

Example:
    host = RecordingHost()
    runner = ProgramRunner(Interpreter(host))
    await runner.submit('10 INPUT "NAME"; N$')
    await runner.submit("20 PRINT N$")
    await runner.submit("RUN")
    await runner.submit("ADA")
    await runner.wait()
"""

import asyncio
import logging

from mybasic.mybasic_interpreter import Interpreter, InterpreterState

logger = logging.getLogger(__name__)


class ProgramRunner:
    def __init__(
        self, interpreter: Interpreter, input_timeout: float | None = None
    ) -> None:
        self.interpreter = interpreter
        self.input_timeout = input_timeout
        self._wake = asyncio.Event()
        self._input_requested = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.steps = 0

    @property
    def task(self) -> "asyncio.Task[None] | None":
        return self._task

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def submit(self, text: str) -> None:
        """Deliver one line of user text and start driving the program if RUN began."""
        self.interpreter.deliver_line(text)
        if self.active:
            self._input_requested.clear()
            self._wake.set()
        elif self.interpreter.state is InterpreterState.EXECUTING:
            self._task = asyncio.create_task(self._drive())
        # Let a freshly started or resumed run make progress before returning.
        await asyncio.sleep(0)

    async def wait(self) -> None:
        """Wait until the current run, if any, has finished."""
        if self._task is not None:
            await self._task

    async def until_blocked(self) -> bool:
        """Wait until the run asks for INPUT (returns True) or has ended (returns False)."""
        while self._task is not None and not self._task.done():
            if self._input_requested.is_set():
                return True
            waiter = asyncio.ensure_future(self._input_requested.wait())
            try:
                await asyncio.wait(
                    {self._task, waiter}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                waiter.cancel()
        return False

    def stop(self) -> None:
        """Stop the running program at the next statement boundary."""
        self.interpreter.stop()
        self._wake.set()

    async def _drive(self) -> None:
        interp = self.interpreter
        try:
            while interp.running:
                if interp.state is InterpreterState.AWAITING_INPUT:
                    self._wake.clear()
                    self._input_requested.set()
                    try:
                        await asyncio.wait_for(self._wake.wait(), self.input_timeout)
                    except asyncio.TimeoutError:
                        logger.info("INPUT timed out after %ss", self.input_timeout)
                        interp.stop("INPUT TIMEOUT")
                    finally:
                        self._input_requested.clear()
                    continue
                interp.step()
                self.steps += 1
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            interp.stop()
            raise


__all__ = ["ProgramRunner"]
