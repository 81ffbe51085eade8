"""
Host notifications and their normalization into lifecycle events.
"""

from .host import BuildHost, InProcessBuildHost
from .source import (
    EventHandler,
    EventSource,
    HostEventSource,
    SubscriptionHandle,
    configuration_display_name,
)

__all__ = [
    "BuildHost",
    "InProcessBuildHost",
    "EventHandler",
    "EventSource",
    "HostEventSource",
    "SubscriptionHandle",
    "configuration_display_name",
]
