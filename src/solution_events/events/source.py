"""
Event source: normalizes host notifications into ``EventFired`` callbacks.

The orchestrator only ever sees ``EventSource``; the three heterogeneous
host registrations (build begin, build done, active configuration changed)
are hidden behind ``HostEventSource``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..models.config import EventKind
from ..models.runtime import EventFired
from .host import BuildHost

logger = logging.getLogger(__name__)

EventHandler = Callable[[EventFired], None]


@dataclass
class SubscriptionHandle:
    """Registration state returned by ``EventSource.subscribe``."""

    build_cookie: Any = None
    configuration_cookie: Any = None
    active: bool = False


class EventSource(ABC):
    """Uniform stream of lifecycle events."""

    @abstractmethod
    def subscribe(self, handler: EventHandler) -> SubscriptionHandle:
        """Start delivering events to ``handler``."""

    @abstractmethod
    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """Stop delivering events for ``handle``. Safe to call repeatedly."""


def configuration_display_name(descriptor: Any) -> Optional[str]:
    """Extract a configuration's display name from a host descriptor."""
    if descriptor is None or isinstance(descriptor, str):
        return descriptor
    name = getattr(descriptor, "display_name", None)
    if callable(name):
        name = name()
    return str(name) if name is not None else str(descriptor)


class HostEventSource(EventSource):
    """
    EventSource backed by a ``BuildHost``.

    If the host refuses a registration, the subscription is rolled back and
    the returned handle stays inactive: the feature goes inert instead of
    failing the host.
    """

    def __init__(self, host: BuildHost):
        self.host = host

    def subscribe(self, handler: EventHandler) -> SubscriptionHandle:
        handle = SubscriptionHandle()

        def dispatch(event: EventFired) -> None:
            if not handle.active:
                logger.debug(f"Dropping {event.kind.value} after unsubscribe")
                return
            handler(event)

        def on_begin() -> None:
            dispatch(EventFired(EventKind.PRE_BUILD))

        def on_done() -> None:
            dispatch(EventFired(EventKind.POST_BUILD))

        def on_configuration_changed(old_descriptor: Any, new_descriptor: Any) -> None:
            # Every change fires; the old name is never compared.
            new_name = configuration_display_name(new_descriptor)
            logger.debug(f"Configuration changed to: {new_name}")
            dispatch(EventFired(EventKind.CONFIGURATION_CHANGED, configuration_name=new_name))

        try:
            handle.build_cookie = self.host.advise_build_events(on_begin, on_done)
        except Exception as e:
            logger.warning(f"Build event registration failed, solution build events disabled: {e}")
            return handle

        try:
            handle.configuration_cookie = self.host.advise_configuration_events(
                on_configuration_changed
            )
        except Exception as e:
            logger.warning(
                f"Configuration event registration failed, solution build events disabled: {e}"
            )
            self._release(handle)
            return handle

        handle.active = True
        logger.info("Subscribed to build and configuration events")
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        if not handle.active:
            return
        handle.active = False
        self._release(handle)
        logger.info("Unsubscribed from build and configuration events")

    def _release(self, handle: SubscriptionHandle) -> None:
        if handle.build_cookie is not None:
            try:
                self.host.unadvise_build_events(handle.build_cookie)
            except Exception as e:
                logger.warning(f"Failed to unadvise build events: {e}")
            handle.build_cookie = None
        if handle.configuration_cookie is not None:
            try:
                self.host.unadvise_configuration_events(handle.configuration_cookie)
            except Exception as e:
                logger.warning(f"Failed to unadvise configuration events: {e}")
            handle.configuration_cookie = None
