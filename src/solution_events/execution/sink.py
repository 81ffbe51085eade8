"""
Output sinks for command output.

A sink is an append-only text destination keyed by a channel name. Each
accepted entry becomes one ``"<header>: <message>"`` line.
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Dict, Optional

logger = logging.getLogger(__name__)


def format_entry(header: str, message: str) -> str:
    return f"{header}: {message}"


class LogSink(ABC):
    """Append-only, channel-keyed text sink. Safe for interleaved writers."""

    def write(self, channel: str, header: str, message: Optional[str]) -> bool:
        """
        Append one entry to ``channel``.

        Empty or None messages are dropped.

        Returns:
            True if a line was written
        """
        if not message:
            return False
        self._emit(channel, format_entry(header, message))
        return True

    @abstractmethod
    def _emit(self, channel: str, line: str) -> None:
        pass

    def close(self) -> None:
        """Release any resources held by the sink."""


class LoggerSink(LogSink):
    """Routes channel lines to the ``logging`` tree under ``base_logger``."""

    def __init__(self, base_logger: str = "solution_events.channel", level: int = logging.INFO):
        self.base_logger = base_logger
        self.level = level

    def _emit(self, channel: str, line: str) -> None:
        logging.getLogger(f"{self.base_logger}.{channel}").log(self.level, line)


class FileLogSink(LogSink):
    """
    Appends each channel to ``<log_dir>/<channel>.log``.

    Files are opened lazily on first write and flushed after every line so
    output is visible while a command is still running.
    """

    def __init__(self, log_dir: Path, encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.encoding = encoding
        self.log_files: Dict[str, IO[Any]] = {}
        self._lock = threading.Lock()

    def path_for(self, channel: str) -> Path:
        safe_name = re.sub(r"[^\w.\- ]", "_", channel).strip() or "channel"
        return self.log_dir / f"{safe_name}.log"

    def _emit(self, channel: str, line: str) -> None:
        with self._lock:
            log_file = self.log_files.get(channel)
            if log_file is None:
                path = self.path_for(channel)
                path.parent.mkdir(parents=True, exist_ok=True)
                log_file = open(path, "a", encoding=self.encoding)
                self.log_files[channel] = log_file
                logger.debug(f"Opened channel log: {channel} -> {path}")
            log_file.write(line + "\n")
            log_file.flush()

    def close(self) -> None:
        """Close all opened channel files."""
        with self._lock:
            if not self.log_files:
                logger.debug("No channel logs to close")
                return
            self._safe_close_files(self.log_files)
            self.log_files.clear()

    def _safe_close_files(self, files_dict: Dict[str, Any]) -> None:
        """
        Close a dictionary of file handles, continuing past individual failures.
        """
        closed_count = 0
        failed_count = 0

        for name, file_handle in files_dict.items():
            try:
                file_handle.close()
                closed_count += 1
            except Exception as e:
                failed_count += 1
                logger.warning(f"Failed to close channel log {name}: {e}")

        if closed_count > 0:
            logger.debug(f"Closed {closed_count} channel logs")
        if failed_count > 0:
            logger.warning(f"Failed to close {failed_count} channel logs")


def create_sink(log_dir: Optional[Path], encoding: str = "utf-8") -> LogSink:
    """Pick the sink matching the settings: files when ``log_dir`` is set."""
    if log_dir is not None:
        return FileLogSink(log_dir, encoding=encoding)
    return LoggerSink()
