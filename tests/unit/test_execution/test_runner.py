"""
Tests for CommandRunner.

These run real child processes through /bin/sh.
"""

import sys
from unittest.mock import AsyncMock, patch

import pytest

from solution_events.execution import CommandRunner
from solution_events.execution.runner import STREAM_LIMIT

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh command lines")

HEADER = "Prebuild event"
CHANNEL = "Solution Build Events"


@pytest.fixture
def runner(sink):
    return CommandRunner(sink, shell="/bin/sh")


@pytest.mark.asyncio
async def test_stdout_lines_are_forwarded_with_header(runner, sink):
    result = await runner.run(["echo hello; echo world"], HEADER, CHANNEL)

    assert sink.entries == [
        (CHANNEL, "Prebuild event: hello"),
        (CHANNEL, "Prebuild event: world"),
    ]
    assert result.outcomes[0].exit_code == 0
    assert result.succeeded


@pytest.mark.asyncio
async def test_stderr_lines_are_marked_as_errors(runner, sink):
    result = await runner.run(["echo broken >&2"], HEADER, CHANNEL)

    assert sink.lines == ["Prebuild event (ERROR): broken"]
    assert result.outcomes[0].lines == [("stderr", "broken")]


@pytest.mark.asyncio
async def test_empty_lines_are_suppressed(runner, sink):
    result = await runner.run(["printf '\\n\\nvisible\\n\\n'"], HEADER, CHANNEL)

    assert sink.lines == ["Prebuild event: visible"]
    assert result.outcomes[0].lines == [("stdout", "visible")]


@pytest.mark.asyncio
async def test_command_without_output_writes_nothing(runner, sink):
    result = await runner.run(["true"], HEADER, CHANNEL)

    assert sink.entries == []
    assert result.outcomes[0].exit_code == 0


@pytest.mark.asyncio
async def test_empty_command_list(runner, sink):
    result = await runner.run([], HEADER, CHANNEL)

    assert result.outcomes == []
    assert sink.entries == []


@pytest.mark.asyncio
async def test_commands_run_strictly_in_order(runner, sink):
    await runner.run(["sleep 0.2; echo A", "echo B"], HEADER, CHANNEL)

    assert sink.lines == ["Prebuild event: A", "Prebuild event: B"]


@pytest.mark.asyncio
async def test_later_command_sees_side_effects_of_earlier_one(runner, sink, tmp_path):
    marker = tmp_path / "artifact.txt"

    await runner.run(
        [f"sleep 0.1; echo built > '{marker}'", f"cat '{marker}'"], HEADER, CHANNEL
    )

    assert sink.lines == ["Prebuild event: built"]


@pytest.mark.asyncio
async def test_failure_does_not_abort_remaining_commands(runner, sink):
    result = await runner.run(["echo first; exit 3", "echo second"], HEADER, CHANNEL)

    assert [outcome.exit_code for outcome in result.outcomes] == [3, 0]
    assert sink.lines == ["Prebuild event: first", "Prebuild event: second"]
    assert not result.aborted
    assert [outcome.command for outcome in result.failed] == ["echo first; exit 3"]
    assert not result.succeeded


@pytest.mark.asyncio
async def test_fail_fast_policy_stops_after_first_failure(sink):
    runner = CommandRunner(sink, shell="/bin/sh", continue_on_failure=False)

    result = await runner.run(["exit 1", "echo never"], HEADER, CHANNEL)

    assert len(result.outcomes) == 1
    assert result.aborted
    assert sink.entries == []


@pytest.mark.asyncio
async def test_fail_fast_on_last_command_is_not_an_abort(sink):
    runner = CommandRunner(sink, shell="/bin/sh", continue_on_failure=False)

    result = await runner.run(["echo ok", "exit 1"], HEADER, CHANNEL)

    assert len(result.outcomes) == 2
    assert not result.aborted


@pytest.mark.asyncio
async def test_spawn_failure_is_logged_not_raised(sink, tmp_path):
    runner = CommandRunner(sink, shell=str(tmp_path / "no-such-shell"))

    result = await runner.run(["echo a", "echo b"], HEADER, CHANNEL)

    assert len(result.outcomes) == 2
    assert all(outcome.spawn_error for outcome in result.outcomes)
    assert all(outcome.exit_code is None for outcome in result.outcomes)
    assert len(sink.lines) == 2
    assert sink.lines[0].startswith("Prebuild event (ERROR): Failed to start 'echo a'")


@pytest.mark.asyncio
async def test_interleaved_streams_keep_arrival_order(runner):
    result = await runner.run(
        ["echo out1; sleep 0.1; echo err1 >&2; sleep 0.1; echo out2"], HEADER, CHANNEL
    )

    assert result.outcomes[0].lines == [
        ("stdout", "out1"),
        ("stderr", "err1"),
        ("stdout", "out2"),
    ]


@pytest.mark.asyncio
async def test_working_directory_override(runner, sink, tmp_path):
    await runner.run(["pwd"], HEADER, CHANNEL, cwd=tmp_path)

    assert sink.lines == [f"Prebuild event: {tmp_path.resolve()}"]


@pytest.mark.asyncio
async def test_undecodable_output_is_replaced(runner, sink):
    await runner.run(["printf 'bad \\377 byte\\n'"], HEADER, CHANNEL)

    assert sink.lines == ["Prebuild event: bad � byte"]


@pytest.mark.asyncio
async def test_running_pids_are_cleared_after_completion(runner):
    await runner.run(["echo done"], HEADER, CHANNEL)

    assert runner.running_pids == set()


@pytest.mark.asyncio
async def test_line_longer_than_stream_limit_is_forwarded(runner, sink, tmp_path):
    marker = tmp_path / "marker"

    result = await runner.run(
        [f"head -c 2000000 /dev/zero | tr '\\0' x; echo; sleep 0.1; touch '{marker}'; echo done"],
        HEADER,
        CHANNEL,
    )

    outcome = result.outcomes[0]
    assert outcome.exit_code == 0
    assert outcome.spawn_error is None
    assert marker.exists()
    long_pieces = [text for _, text in outcome.lines[:-1]]
    assert sum(len(text) for text in long_pieces) == 2000000
    assert all(len(text) >= STREAM_LIMIT for text in long_pieces[:-1])
    assert sink.lines[-1] == "Prebuild event: done"


@pytest.mark.asyncio
async def test_failed_output_forwarding_lets_command_finish(sink, tmp_path):
    class BrokenSink(type(sink)):
        failed = False

        def _emit(self, channel, line):
            if not self.failed:
                self.failed = True
                raise RuntimeError("sink unavailable")
            super()._emit(channel, line)

    broken = BrokenSink()
    runner = CommandRunner(broken, shell="/bin/sh")
    marker = tmp_path / "marker"

    result = await runner.run(
        [f"echo first; sleep 0.2; echo later >&2; touch '{marker}'"], HEADER, CHANNEL
    )

    assert result.outcomes[0].exit_code == 0
    assert marker.exists()
    assert len(broken.lines) == 1
    assert broken.lines[0].startswith("Prebuild event (ERROR): Lost output of 'echo first")
    assert broken.lines[0].endswith(": sink unavailable")
    assert runner.running_pids == set()


@pytest.mark.asyncio
async def test_cmd_receives_line_unquoted(sink):
    runner = CommandRunner(sink, shell="cmd.exe")

    with patch("solution_events.system.commands.platform.system", return_value="Windows"), \
            patch("solution_events.execution.runner.asyncio.create_subprocess_shell",
                  new_callable=AsyncMock) as mock_shell, \
            patch("solution_events.execution.runner.asyncio.create_subprocess_exec",
                  new_callable=AsyncMock) as mock_exec:
        await runner._spawn('copy "a b" c', None)

    assert mock_shell.await_args.args == ('copy "a b" c',)
    mock_exec.assert_not_called()


@pytest.mark.asyncio
async def test_other_shells_receive_argv(sink):
    runner = CommandRunner(sink, shell="pwsh")

    with patch("solution_events.system.commands.platform.system", return_value="Windows"), \
            patch("solution_events.execution.runner.asyncio.create_subprocess_exec",
                  new_callable=AsyncMock) as mock_exec:
        await runner._spawn('Write-Output "a b"', None)

    assert mock_exec.await_args.args == ("pwsh", "-Command", 'Write-Output "a b"')
