import asyncio

from mybasic.mybasic_host import RecordingHost
from mybasic.mybasic_interpreter import READY, Interpreter, InterpreterState
from mybasic.mybasic_runner import ProgramRunner


def program_output(host: RecordingHost) -> list[str]:
    return [line for line in host.output if not line.startswith(">")]


async def submit_all(runner: ProgramRunner, *lines: str) -> None:
    for line in lines:
        await runner.submit(line)


def test_runs_program_to_completion() -> None:
    host = RecordingHost()

    async def scenario() -> None:
        runner = ProgramRunner(Interpreter(host))
        await submit_all(runner, "10 LET A = 2", "20 PRINT A * 21", "RUN")
        await runner.wait()
        assert runner.steps == 2
        assert not runner.active

    asyncio.run(scenario())
    assert program_output(host) == ["42", READY]


def test_input_round_trip() -> None:
    host = RecordingHost()
    interp = Interpreter(host)

    async def scenario() -> None:
        runner = ProgramRunner(interp)
        await submit_all(runner, '10 INPUT "NAME"; N$', "20 PRINT N$", "RUN")
        assert await runner.until_blocked() is True
        assert interp.state is InterpreterState.AWAITING_INPUT
        assert host.prompts == ["NAME "]
        await runner.submit("ADA")
        assert await runner.until_blocked() is False
        await runner.wait()

    asyncio.run(scenario())
    assert program_output(host) == ["NAME ", "ADA", "ADA", READY]


def test_infinite_loop_yields_and_is_stoppable() -> None:
    host = RecordingHost()
    interp = Interpreter(host)

    async def scenario() -> None:
        runner = ProgramRunner(interp)
        await submit_all(runner, "10 LET A = 5", "20 PRINT A + 1", "30 GOTO 10", "RUN")
        # the event loop keeps getting control back while the program runs
        for _ in range(50):
            await asyncio.sleep(0)
        assert runner.active
        assert interp.running
        runner.stop()
        await runner.wait()

    asyncio.run(scenario())
    assert interp.state is InterpreterState.IDLE
    out = program_output(host)
    assert out.count("6") >= 5
    assert out[-1] == READY
    assert out[-2].startswith("?BREAK IN ")


def test_other_tasks_progress_while_running() -> None:
    host = RecordingHost()
    ticks: list[int] = []

    async def ticker() -> None:
        for i in range(20):
            ticks.append(i)
            await asyncio.sleep(0)

    async def scenario() -> None:
        runner = ProgramRunner(Interpreter(host))
        await submit_all(runner, "10 GOTO 10", "RUN")
        await ticker()
        runner.stop()
        await runner.wait()

    asyncio.run(scenario())
    assert ticks == list(range(20))


def test_cancelling_the_task_stops_the_program() -> None:
    host = RecordingHost()
    interp = Interpreter(host)

    async def scenario() -> None:
        runner = ProgramRunner(interp)
        await submit_all(runner, "10 GOTO 10", "RUN")
        assert runner.task is not None
        runner.task.cancel()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert runner.task.cancelled()

    asyncio.run(scenario())
    assert interp.state is InterpreterState.IDLE
    assert program_output(host)[-1] == READY


def test_input_timeout_stops_run() -> None:
    host = RecordingHost()
    interp = Interpreter(host)

    async def scenario() -> None:
        runner = ProgramRunner(interp, input_timeout=0.01)
        await submit_all(runner, "10 INPUT A", "20 PRINT A", "RUN")
        await runner.wait()

    asyncio.run(scenario())
    assert interp.state is InterpreterState.IDLE
    assert program_output(host)[-2:] == ["?INPUT TIMEOUT IN 10", READY]


def test_stop_while_waiting_for_input() -> None:
    host = RecordingHost()
    interp = Interpreter(host)

    async def scenario() -> None:
        runner = ProgramRunner(interp)
        await submit_all(runner, "10 INPUT A$", "RUN")
        assert await runner.until_blocked()
        runner.stop()
        await runner.wait()
        assert await runner.until_blocked() is False

    asyncio.run(scenario())
    assert program_output(host)[-2:] == ["?BREAK IN 10", READY]


def test_compile_error_starts_no_task() -> None:
    host = RecordingHost()

    async def scenario() -> None:
        runner = ProgramRunner(Interpreter(host))
        await submit_all(runner, "10 PRINT (", "RUN")
        assert runner.task is None
        assert await runner.until_blocked() is False
        await runner.wait()

    asyncio.run(scenario())
    assert program_output(host) == ["?SYNTAX ERROR IN 10", READY]
