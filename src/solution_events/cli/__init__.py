"""
Command-line interface for the solution_events package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
