"""
Build host abstraction.

``BuildHost`` is the narrow surface this package needs from whatever
process hosts it: advise/unadvise pairs for build, configuration and
solution notifications, plus the current solution path.
``InProcessBuildHost`` is a plain Python implementation whose
notifications are raised by calling its methods; the CLI drives it and
tests use it as a double for a real IDE.
"""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)

Callback = Callable[[], None]
ConfigurationCallback = Callable[[Any, Any], None]


class BuildHost(ABC):
    """Notifications and context provided by the hosting build environment."""

    @abstractmethod
    def advise_build_events(self, on_begin: Callback, on_done: Callback) -> Any:
        """Register build-begin/build-done listeners; returns a cookie."""

    @abstractmethod
    def unadvise_build_events(self, cookie: Any) -> None:
        pass

    @abstractmethod
    def advise_configuration_events(self, on_changed: ConfigurationCallback) -> Any:
        """
        Register an active-configuration-changed listener; returns a cookie.

        ``on_changed`` receives the old and new configuration descriptors.
        """

    @abstractmethod
    def unadvise_configuration_events(self, cookie: Any) -> None:
        pass

    @abstractmethod
    def advise_solution_events(self, on_opened: Callback) -> Any:
        """Register a solution-opened listener; returns a cookie."""

    @abstractmethod
    def unadvise_solution_events(self, cookie: Any) -> None:
        pass

    @abstractmethod
    def solution_path(self) -> Optional[Path]:
        """Full path of the open solution file, or None if nothing is open."""


class InProcessBuildHost(BuildHost):
    """
    A BuildHost whose notifications are raised programmatically.

    Args:
        solution_path: Solution file considered open at construction time
        registration_thread: When given, advise/unadvise calls from any
            other thread raise ``RuntimeError``, mirroring hosts that only
            accept listener registration on their main thread
    """

    def __init__(
        self,
        solution_path: Optional[Union[str, Path]] = None,
        registration_thread: Optional[threading.Thread] = None,
    ):
        self._solution_path = Path(solution_path) if solution_path else None
        self._registration_thread = registration_thread
        self._cookies = itertools.count(1)
        self._lock = threading.Lock()
        self._build_listeners: Dict[int, tuple] = {}
        self._configuration_listeners: Dict[int, ConfigurationCallback] = {}
        self._solution_listeners: Dict[int, Callback] = {}
        self.active_configuration: Optional[str] = None

    def _check_thread(self) -> None:
        if self._registration_thread is None:
            return
        if threading.current_thread() is not self._registration_thread:
            raise RuntimeError(
                f"Listeners must be registered on thread {self._registration_thread.name}"
            )

    # --- BuildHost ---

    def advise_build_events(self, on_begin: Callback, on_done: Callback) -> int:
        self._check_thread()
        with self._lock:
            cookie = next(self._cookies)
            self._build_listeners[cookie] = (on_begin, on_done)
        return cookie

    def unadvise_build_events(self, cookie: int) -> None:
        self._check_thread()
        with self._lock:
            self._build_listeners.pop(cookie, None)

    def advise_configuration_events(self, on_changed: ConfigurationCallback) -> int:
        self._check_thread()
        with self._lock:
            cookie = next(self._cookies)
            self._configuration_listeners[cookie] = on_changed
        return cookie

    def unadvise_configuration_events(self, cookie: int) -> None:
        self._check_thread()
        with self._lock:
            self._configuration_listeners.pop(cookie, None)

    def advise_solution_events(self, on_opened: Callback) -> int:
        self._check_thread()
        with self._lock:
            cookie = next(self._cookies)
            self._solution_listeners[cookie] = on_opened
        return cookie

    def unadvise_solution_events(self, cookie: int) -> None:
        self._check_thread()
        with self._lock:
            self._solution_listeners.pop(cookie, None)

    def solution_path(self) -> Optional[Path]:
        return self._solution_path

    # --- Notification triggers ---

    @property
    def listener_count(self) -> int:
        with self._lock:
            return (
                len(self._build_listeners)
                + len(self._configuration_listeners)
                + len(self._solution_listeners)
            )

    def begin_build(self) -> None:
        with self._lock:
            listeners = [begin for begin, _ in self._build_listeners.values()]
        for listener in listeners:
            listener()

    def finish_build(self) -> None:
        with self._lock:
            listeners = [done for _, done in self._build_listeners.values()]
        for listener in listeners:
            listener()

    def change_configuration(self, new_configuration: str) -> None:
        old_configuration = self.active_configuration
        self.active_configuration = new_configuration
        with self._lock:
            listeners = list(self._configuration_listeners.values())
        for listener in listeners:
            listener(old_configuration, new_configuration)

    def open_solution(self, solution_path: Union[str, Path]) -> None:
        self._solution_path = Path(solution_path)
        with self._lock:
            listeners = list(self._solution_listeners.values())
        for listener in listeners:
            listener()
