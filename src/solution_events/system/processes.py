"""
Inspection of child processes started by command runs.
"""

import logging
from typing import Iterable, List

import psutil

logger = logging.getLogger(__name__)


def is_process_alive(pid: int) -> bool:
    """Safely check if a process is still alive and not a zombie."""
    try:
        process = psutil.Process(pid)
        if not process.is_running():
            return False
        return process.status() not in [psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False


def describe_live_processes(pids: Iterable[int]) -> List[str]:
    """
    Describe the still-running processes among ``pids``.

    Each description is ``"PID <pid> (<name>): <cmdline>"``; processes that
    exited or cannot be inspected are left out.
    """
    descriptions = []
    for pid in pids:
        if not is_process_alive(pid):
            continue
        try:
            process = psutil.Process(pid)
            cmdline = " ".join(process.cmdline()[:4])
            descriptions.append(f"PID {pid} ({process.name()}): {cmdline}")
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        except Exception as e:
            logger.debug(f"Could not inspect PID {pid}: {e}")
    return descriptions
