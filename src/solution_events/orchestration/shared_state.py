"""
Shared state definitions for the orchestration module.
"""

from enum import Enum


class OrchestratorState(Enum):
    """Config-path freshness as seen by the orchestrator."""

    # No solution context has produced a command document path yet.
    UNINITIALIZED = "uninitialized"
    # The path is being recomputed; dispatch keeps using the previous one.
    RESOLVING = "resolving"
    READY = "ready"


class TimeoutConstants:
    """
    Centralized timeout configuration.
    """
    # How long stop() waits for the worker to notice cancellation.
    WORKER_CANCEL_TIMEOUT = 5.0
