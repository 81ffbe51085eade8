"""
Runtime data models.

This module contains the transient structures produced while events are
dispatched and command lines are executed.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import EventKind


@dataclass(frozen=True)
class EventFired:
    """A normalized lifecycle notification delivered by an event source."""

    kind: EventKind
    # Display name of the new active configuration, for CONFIGURATION_CHANGED.
    configuration_name: Optional[str] = None


@dataclass
class ProcessOutcome:
    """
    Result of running a single command line.

    ``lines`` keeps the interleaved output in arrival order as
    ``(stream, text)`` pairs, where ``stream`` is ``"stdout"`` or ``"stderr"``.
    """

    command: str
    exit_code: Optional[int] = None
    lines: List[Tuple[str, str]] = field(default_factory=list)
    # Set when the process could not be started at all.
    spawn_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.spawn_error is None and self.exit_code == 0


@dataclass
class RunResult:
    """Outcomes of one ``CommandRunner.run`` call, in execution order."""

    header: str
    outcomes: List[ProcessOutcome] = field(default_factory=list)
    # True when the sequence was cut short by a fail-fast policy.
    aborted: bool = False

    @property
    def failed(self) -> List[ProcessOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def succeeded(self) -> bool:
        return not self.failed and not self.aborted
