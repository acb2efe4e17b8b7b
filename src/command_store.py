"""
Command storage for Butiki

The table is a flat JSON object mapping labels to shell command strings.
It is loaded fresh for every operation and written back in full.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from constants import JSON_INDENT, STORE_FILE_MODE
from errors import (
    InvalidFormat,
    LabelExists,
    LabelNotFound,
    MalformedJSON,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(f"butiki.{__name__}")

CommandTable = Dict[str, str]


@dataclass
class ImportResult:
    """Outcome of merging an import file into the store"""
    count: int  # entries in the imported file, not entries that changed
    load_error: Optional[str] = None  # existing store could not be loaded
    backup_path: Optional[Path] = None  # where a corrupted store was moved


def parse_table(text: str, source: Union[str, Path]) -> CommandTable:
    """Parse JSON text into a label -> command table, raising MalformedJSON"""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJSON(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise MalformedJSON(f"Expected a JSON object in {source}, got {type(data).__name__}")

    for label, command in data.items():
        if not isinstance(command, str):
            raise MalformedJSON(f"Command for label '{label}' in {source} is not a string")

    return data


def write_table(table: CommandTable, path: Path):
    """Write a table as indented JSON, creating the file with mode 0644"""
    data = json.dumps(table, indent=JSON_INDENT)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, STORE_FILE_MODE)
        with os.fdopen(fd, 'w') as f:
            f.write(data)
    except OSError as e:
        raise StoreWriteError(f"Failed to write {path}: {e}") from e


def read_text(path: Path) -> str:
    try:
        with open(path, 'r') as f:
            return f.read()
    except OSError as e:
        raise StoreReadError(f"Failed to read {path}: {e}") from e


class CommandStore:
    """
    Manages the persistent label -> command table
    """

    def __init__(self, commands_path: Union[str, Path]):
        self.commands_path = Path(commands_path)

    def load(self) -> CommandTable:
        """Load the table; a missing file is an empty table"""
        if not self.commands_path.exists():
            logger.debug("No store at %s, starting empty", self.commands_path)
            return {}

        table = parse_table(read_text(self.commands_path), self.commands_path)
        logger.debug("Loaded %d command(s) from %s", len(table), self.commands_path)
        return table

    def save(self, table: CommandTable):
        """Save the full table, overwriting the store file"""
        write_table(table, self.commands_path)
        logger.debug("Saved %d command(s) to %s", len(table), self.commands_path)

    def add_command(self, label: str, command: str):
        """Insert a new command; raises LabelExists if the label is taken"""
        table = self.load()

        if label in table:
            raise LabelExists(label)

        table[label] = command
        self.save(table)

    def update_command(self, label: str, command: str):
        """Replace an existing command; raises LabelNotFound if absent"""
        table = self.load()

        if label not in table:
            raise LabelNotFound(label)

        table[label] = command
        self.save(table)

    def delete_command(self, label: str):
        """Remove a command; raises LabelNotFound if absent"""
        table = self.load()

        if label not in table:
            raise LabelNotFound(label)

        del table[label]
        self.save(table)

    def get_command(self, label: str) -> str:
        table = self.load()

        if label not in table:
            raise LabelNotFound(label)

        return table[label]

    def list_commands(self) -> List[Tuple[str, str]]:
        """All (label, command) pairs, sorted by label"""
        return sorted(self.load().items())

    def search(self, keyword: str) -> List[Tuple[str, str]]:
        """Entries whose label or command contains keyword (case-sensitive)"""
        return [
            (label, command)
            for label, command in self.list_commands()
            if keyword in label or keyword in command
        ]

    def export_to(self, export_path: Union[str, Path]) -> int:
        """Dump the full table to export_path; returns the entry count"""
        table = self.load()
        write_table(table, Path(export_path))
        logger.info("Exported %d command(s) to %s", len(table), export_path)
        return len(table)

    def import_from(self, import_path: Union[str, Path]) -> ImportResult:
        """
        Merge commands from import_path into the store.

        Imported entries win on conflict. If the existing store cannot be
        loaded the merge starts from an empty table; a corrupted store file
        is moved aside first.
        """
        import_path = Path(import_path)
        text = read_text(import_path)

        try:
            imported = parse_table(text, import_path)
        except MalformedJSON as e:
            raise InvalidFormat(str(e)) from e

        result = ImportResult(count=len(imported))
        try:
            table = self.load()
        except (MalformedJSON, StoreReadError) as e:
            logger.info("Import falling back to empty table: %s", e)
            result.load_error = str(e)
            if isinstance(e, MalformedJSON):
                result.backup_path = self._backup_corrupted()
            table = {}

        table.update(imported)
        self.save(table)
        return result

    def _backup_corrupted(self) -> Optional[Path]:
        """Move a corrupted store file aside before it gets overwritten"""
        if not self.commands_path.exists():
            return None

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_path = self.commands_path.with_name(
            f"{self.commands_path.name}.corrupted.{timestamp}.bak"
        )
        try:
            self.commands_path.rename(backup_path)
        except OSError as e:
            raise StoreWriteError(f"Failed to back up {self.commands_path}: {e}") from e

        logger.info("Corrupted store backed up to %s", backup_path)
        return backup_path
