"""
Orchestration of lifecycle events into command runs.

Components:
- Orchestrator: resolves the command document, queues events, runs commands
- OrchestratorState: config-path freshness states
"""

from .orchestrator import Orchestrator
from .shared_state import OrchestratorState, TimeoutConstants

__all__ = [
    "Orchestrator",
    "OrchestratorState",
    "TimeoutConstants",
]
