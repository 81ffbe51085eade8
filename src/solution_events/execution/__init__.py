"""
Command execution and output capture.
"""

from .runner import ERROR_MARKER, CommandRunner, error_header
from .sink import FileLogSink, LoggerSink, LogSink, create_sink, format_entry

__all__ = [
    "CommandRunner",
    "ERROR_MARKER",
    "error_header",
    "LogSink",
    "LoggerSink",
    "FileLogSink",
    "create_sink",
    "format_entry",
]
