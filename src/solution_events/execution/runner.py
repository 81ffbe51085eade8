"""
Sequential command execution with streamed output capture.

``CommandRunner`` hands each configured command line to the command
interpreter, forwards every stdout/stderr line to the sink as soon as it
arrives, and waits for the process to exit before starting the next one.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional, Set

from ..models.config import default_shell
from ..models.runtime import ProcessOutcome, RunResult
from ..system.commands import build_shell_argv, passes_line_verbatim
from ..validation import ErrorSeverity, handle_subprocess_error
from .sink import LogSink

logger = logging.getLogger(__name__)

ERROR_MARKER = "(ERROR)"

# Longest run of output forwarded as a single line.
STREAM_LIMIT = 1024 * 1024
READ_CHUNK_SIZE = 64 * 1024


def error_header(header: str) -> str:
    return f"{header} {ERROR_MARKER}"


class CommandRunner:
    """
    Runs command lines one at a time through a single command interpreter.

    Args:
        sink: Destination for output lines
        shell: Interpreter executable (platform default when None)
        continue_on_failure: Run the remaining lines after a failure
        encoding: Decoding used for child output
        cwd: Working directory for child processes (inherited when None)
    """

    def __init__(
        self,
        sink: LogSink,
        shell: Optional[str] = None,
        continue_on_failure: bool = True,
        encoding: str = "utf-8",
        cwd: Optional[Path] = None,
    ):
        self.sink = sink
        self.shell = shell or default_shell()
        self.continue_on_failure = continue_on_failure
        self.encoding = encoding
        self.cwd = cwd
        # PIDs of children currently being awaited.
        self.running_pids: Set[int] = set()

    async def run(
        self,
        command_lines: Iterable[str],
        header: str,
        channel: str,
        cwd: Optional[Path] = None,
    ) -> RunResult:
        """
        Execute ``command_lines`` in order.

        ``cwd`` overrides the runner's working directory for this call.

        Never raises for command failures: spawn errors and non-zero exits
        are recorded in the result and surfaced through the sink.
        """
        commands = list(command_lines)
        result = RunResult(header=header)
        logger.info(f"{header}: running {len(commands)} command line(s)")

        for index, command_line in enumerate(commands):
            outcome = await self._run_one(command_line, header, channel, cwd or self.cwd)
            result.outcomes.append(outcome)

            if not outcome.succeeded and not self.continue_on_failure:
                remaining = len(commands) - index - 1
                if remaining:
                    result.aborted = True
                    logger.warning(
                        f"{header}: stopping after failed command '{command_line}', "
                        f"{remaining} command line(s) skipped"
                    )
                break

        if result.failed:
            logger.warning(f"{header}: {len(result.failed)} of {len(result.outcomes)} command line(s) failed")
        return result

    async def _spawn(self, command_line: str, cwd: Optional[Path]) -> asyncio.subprocess.Process:
        """Start one command line under the interpreter with piped output."""
        kwargs = dict(
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
        if passes_line_verbatim(self.shell):
            # Runs as %COMSPEC% /c "<line>"; cmd strips the outer quotes only.
            return await asyncio.create_subprocess_shell(command_line, **kwargs)
        argv = build_shell_argv(self.shell, command_line)
        return await asyncio.create_subprocess_exec(*argv, **kwargs)

    async def _run_one(
        self, command_line: str, header: str, channel: str, cwd: Optional[Path]
    ) -> ProcessOutcome:
        outcome = ProcessOutcome(command=command_line)
        logger.debug(f"Executing command: '{command_line}' via {self.shell}")

        try:
            process = await self._spawn(command_line, cwd)
        except (OSError, ValueError) as e:
            outcome.spawn_error = f"{type(e).__name__}: {e}"
            handle_subprocess_error(
                e, command_line, severity=ErrorSeverity.WARNING, reraise=False, logger=logger
            )
            self.sink.write(channel, error_header(header), f"Failed to start '{command_line}': {e}")
            return outcome

        self.running_pids.add(process.pid)
        pumps = [
            asyncio.ensure_future(self._pump(process.stdout, "stdout", header, channel, outcome)),
            asyncio.ensure_future(self._pump(process.stderr, "stderr", header, channel, outcome)),
        ]
        try:
            try:
                await asyncio.gather(*pumps)
            except Exception as e:
                handle_subprocess_error(
                    e, command_line, severity=ErrorSeverity.ERROR, reraise=False, logger=logger
                )
                self.sink.write(channel, error_header(header), f"Lost output of '{command_line}': {e}")
                for pump in pumps:
                    pump.cancel()
                await asyncio.gather(*pumps, return_exceptions=True)
                # Keep the pipes empty so the command can run to completion.
                await asyncio.gather(
                    self._discard(process.stdout), self._discard(process.stderr)
                )
            outcome.exit_code = await process.wait()
        finally:
            self.running_pids.discard(process.pid)

        if outcome.exit_code != 0:
            logger.warning(f"Command '{command_line}' exited with code {outcome.exit_code}")
        else:
            logger.debug(f"Command '{command_line}' completed successfully")
        return outcome

    async def _pump(
        self,
        stream: Optional[asyncio.StreamReader],
        stream_name: str,
        header: str,
        channel: str,
        outcome: ProcessOutcome,
    ) -> None:
        """
        Forward ``stream`` to the sink line by line until EOF.

        A line longer than ``STREAM_LIMIT`` is forwarded in pieces of at
        least that size instead of being held back.
        """
        if stream is None:
            return
        line_header = header if stream_name == "stdout" else error_header(header)
        pending = b""
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            pending += chunk
            *complete, pending = pending.split(b"\n")
            for raw in complete:
                self._forward(raw, stream_name, line_header, channel, outcome)
            if len(pending) >= STREAM_LIMIT:
                self._forward(pending, stream_name, line_header, channel, outcome)
                pending = b""
        if pending:
            self._forward(pending, stream_name, line_header, channel, outcome)

    def _forward(
        self, raw: bytes, stream_name: str, line_header: str, channel: str, outcome: ProcessOutcome
    ) -> None:
        text = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
        if not text:
            return
        outcome.lines.append((stream_name, text))
        self.sink.write(channel, line_header, text)

    @staticmethod
    async def _discard(stream: Optional[asyncio.StreamReader]) -> None:
        if stream is None:
            return
        while await stream.read(READ_CHUNK_SIZE):
            pass
