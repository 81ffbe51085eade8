"""
Per-solution command document storage.

The command document is a small JSON file living next to the solution.
``ConfigStore`` derives its location, creates a self-documenting default
on first use, and parses it into a ``Parameter`` on every event.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from ..models.config import DEFAULT_CONFIG_FILENAME, EventKind, Parameter
from ..system.commands import open_in_editor
from ..validation import (
    ConfigNotFoundError,
    ErrorSeverity,
    MalformedConfigError,
    PersistenceError,
    ValidationError,
    handle_file_error,
    validate_command_list,
)

logger = logging.getLogger(__name__)


def parse_document(data: Any, path: Optional[Path] = None) -> Parameter:
    """
    Build a ``Parameter`` from decoded JSON.

    Field order is irrelevant and unknown fields are ignored. A missing or
    null field becomes an empty list.

    Raises:
        MalformedConfigError: If the top level is not an object or a field
            is not a list of strings
    """
    if not isinstance(data, dict):
        raise MalformedConfigError(
            f"Command document {path} must be a JSON object, got {type(data).__name__}",
            path=path,
        )

    lists = {}
    for kind in EventKind:
        try:
            lists[kind] = validate_command_list(
                data.get(kind.document_field), field_name=kind.document_field
            )
        except ValidationError as e:
            raise MalformedConfigError(f"Invalid command document {path}: {e}", path=path) from e

    extra = sorted(set(data) - {kind.document_field for kind in EventKind})
    if extra:
        logger.debug(f"Ignoring unknown fields in {path}: {', '.join(extra)}")

    return Parameter(
        pre_build_event=lists[EventKind.PRE_BUILD],
        post_build_event=lists[EventKind.POST_BUILD],
        configuration_changed_event=lists[EventKind.CONFIGURATION_CHANGED],
    )


class ConfigStore:
    """
    Loads and saves command documents.

    Args:
        filename: Name of the document inside the solution directory
        editor: Editor command used by ``open``; None uses the OS association
        shell: Interpreter the default document's placeholders are written for
    """

    def __init__(
        self,
        filename: str = DEFAULT_CONFIG_FILENAME,
        editor: Optional[str] = None,
        shell: Optional[str] = None,
    ):
        self.filename = filename
        self.editor = editor
        self.shell = shell

    def resolve_path(self, solution_path: Union[str, Path]) -> Path:
        """Derive the document path from the solution file's full name."""
        return Path(solution_path).parent / self.filename

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def ensure_exists(self, path: Path) -> bool:
        """
        Write the default document if nothing exists at ``path``.

        Returns:
            True if a new document was created

        Raises:
            PersistenceError: If the document cannot be written
        """
        if self.exists(path):
            return False
        self.save(path, Parameter.default(self.shell))
        logger.info(f"Created default command document at {path}")
        return True

    def save(self, path: Path, document: Parameter) -> None:
        """
        Serialize ``document`` as indented JSON.

        Raises:
            PersistenceError: If the file cannot be written
        """
        path = Path(path)
        text = json.dumps(document.to_dict(), indent=2)
        try:
            path.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            handle_file_error(
                error=e,
                context=f"writing command document {path}",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            raise PersistenceError(f"Cannot write command document {path}: {e}", path=path) from e
        logger.debug(f"Saved command document to {path}")

    def load(self, path: Path) -> Parameter:
        """
        Read and parse the document at ``path``.

        Raises:
            ConfigNotFoundError: If no file exists at ``path``
            MalformedConfigError: If the content is not a valid document
        """
        path = Path(path)
        try:
            # utf-8-sig tolerates the BOM some Windows editors write
            text = path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as e:
            raise ConfigNotFoundError(path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedConfigError(f"Cannot read command document {path}: {e}", path=path) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedConfigError(f"Invalid JSON in {path}: {e}", path=path) from e

        return parse_document(data, path)

    def open(self, path: Path) -> bool:
        """Ask the editor to open the document. Advisory only."""
        return open_in_editor(path, self.editor)
