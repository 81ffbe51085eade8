"""
Orchestrator binding lifecycle events to configured command runs.

The orchestrator owns the resolved command document path, receives
normalized events from an ``EventSource``, and feeds them through a
single-worker queue so overlapping events are processed one at a time.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from ..config.store import ConfigStore
from ..events.host import BuildHost
from ..events.source import EventSource, HostEventSource, SubscriptionHandle
from ..execution.runner import CommandRunner, error_header
from ..execution.sink import LogSink, create_sink
from ..models.config import EventKind, HookSettings
from ..models.runtime import EventFired, RunResult
from ..system.processes import describe_live_processes
from ..validation import (
    ConfigNotFoundError,
    ErrorSeverity,
    MalformedConfigError,
    SolutionEventsError,
    handle_config_error,
    handle_error,
)
from .shared_state import OrchestratorState, TimeoutConstants

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Runs the configured command list for each lifecycle event.

    Args:
        host: Provides the solution path and solution-opened notifications
        event_source: Delivers build and configuration events
        store: Loads command documents
        runner: Executes command lines
        channel: Sink channel all output is written to
    """

    def __init__(
        self,
        host: BuildHost,
        event_source: EventSource,
        store: ConfigStore,
        runner: CommandRunner,
        channel: str,
    ):
        self.host = host
        self.event_source = event_source
        self.store = store
        self.runner = runner
        self.channel = channel

        self.state = OrchestratorState.UNINITIALIZED
        self.config_path: Optional[Path] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._subscription: Optional[SubscriptionHandle] = None
        self._solution_cookie: Any = None
        self._running = False

    @classmethod
    def from_settings(
        cls, host: BuildHost, settings: HookSettings, sink: Optional[LogSink] = None
    ) -> "Orchestrator":
        """Wire up an orchestrator and its collaborators from settings."""
        sink = sink or create_sink(settings.log_dir, settings.encoding)
        return cls(
            host=host,
            event_source=HostEventSource(host),
            store=ConfigStore(settings.config_filename, settings.editor, settings.shell),
            runner=CommandRunner(
                sink,
                shell=settings.shell,
                continue_on_failure=settings.continue_on_failure,
                encoding=settings.encoding,
            ),
            channel=settings.channel,
        )

    @property
    def sink(self) -> LogSink:
        return self.runner.sink

    @property
    def is_running(self) -> bool:
        return self._running

    # --- Lifecycle ---

    async def start(self) -> None:
        """
        Resolve the command document path and start receiving events.

        Must be awaited on the loop that should run the commands.
        """
        if self._running:
            raise RuntimeError("Orchestrator already started")

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._worker_loop(), name="solution-events-worker")
        self._running = True

        self.resolve_config_path()
        self._subscription = self.event_source.subscribe(self._on_event_fired)

        try:
            self._solution_cookie = self.host.advise_solution_events(self.on_solution_opened)
        except Exception as e:
            handle_error(
                error=e,
                context="registering solution-opened listener",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )

        logger.info(f"Orchestrator started, command document: {self.config_path}")

    async def drain(self) -> None:
        """Wait until every queued event has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """
        Detach from the host and stop the worker.

        Child processes still running are reported, not killed.
        """
        if not self._running:
            return
        self._running = False

        if self._subscription is not None:
            self.event_source.unsubscribe(self._subscription)
            self._subscription = None

        if self._solution_cookie is not None:
            try:
                self.host.unadvise_solution_events(self._solution_cookie)
            except Exception as e:
                logger.warning(f"Failed to unadvise solution events: {e}")
            self._solution_cookie = None

        in_flight = set(self.runner.running_pids)

        if self._worker is not None:
            self._worker.cancel()
            try:
                await asyncio.wait_for(self._worker, timeout=TimeoutConstants.WORKER_CANCEL_TIMEOUT)
            except asyncio.CancelledError:
                pass
            except asyncio.TimeoutError:
                logger.warning("Worker did not stop within the cancel timeout")
            self._worker = None

        for description in describe_live_processes(in_flight):
            logger.warning(f"Command still running after stop: {description}")

        logger.info("Orchestrator stopped")

    # --- Config path ---

    def resolve_config_path(self) -> Optional[Path]:
        """
        Recompute the command document path from the host's solution.

        When no solution is open the previous path is kept.
        """
        previous_state = self.state
        self.state = OrchestratorState.RESOLVING
        try:
            solution_path = self.host.solution_path()
        except Exception as e:
            handle_error(
                error=e,
                context="querying solution path",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            solution_path = None

        if solution_path is None:
            logger.debug("No solution open, keeping previous command document path")
            self.state = previous_state if self.config_path is None else OrchestratorState.READY
            return self.config_path

        self.config_path = self.store.resolve_path(solution_path)
        self.state = OrchestratorState.READY
        logger.debug(f"Command document path resolved to {self.config_path}")
        return self.config_path

    def on_solution_opened(self) -> None:
        self.resolve_config_path()

    # --- Dispatch ---

    def _on_event_fired(self, event: EventFired) -> None:
        """Enqueue an event; safe to call from any thread."""
        if not self._running or self._loop is None or self._queue is None:
            logger.debug(f"Ignoring {event.kind.value}, orchestrator not running")
            return
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if current_loop is self._loop:
            self._queue.put_nowait(event)
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError as e:
            logger.warning(f"Dropping {event.kind.value}, event loop unavailable: {e}")

    async def _worker_loop(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                if event.configuration_name is not None:
                    logger.debug(f"Active configuration is now {event.configuration_name}")
                await self.on_event(event.kind)
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"handling {event.kind.value} event",
                    severity=ErrorSeverity.CRITICAL,
                    reraise=False,
                    logger=logger,
                )
            finally:
                self._queue.task_done()

    async def on_event(self, kind: EventKind) -> Optional[RunResult]:
        """
        Run the command list configured for ``kind``.

        Returns None without touching the sink when the solution has no
        command document, or when the document cannot be parsed (that
        failure is written to the sink instead).
        """
        path = self.config_path
        loop = asyncio.get_running_loop()

        if path is None or not await loop.run_in_executor(None, self.store.exists, path):
            logger.debug(f"No command document for {kind.value}, nothing to run")
            return None

        try:
            document = await loop.run_in_executor(None, self.store.load, path)
        except ConfigNotFoundError:
            logger.debug(f"Command document {path} disappeared before {kind.value}")
            return None
        except MalformedConfigError as e:
            handle_config_error(
                error=e,
                context=f"loading {path}",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            self.sink.write(self.channel, error_header(kind.header), str(e))
            return None

        return await self.runner.run(
            document.commands_for(kind), kind.header, self.channel, cwd=path.parent
        )

    def on_manual_invoke(self) -> Path:
        """
        Create the command document if needed and open it for editing.

        Returns:
            Path of the command document

        Raises:
            SolutionEventsError: If no solution is open
            PersistenceError: If the default document cannot be written
        """
        path = self.resolve_config_path()
        if path is None:
            raise SolutionEventsError("No solution is open, cannot locate the command document")

        self.store.ensure_exists(path)
        self.store.open(path)
        return path
