"""The editor host: directory listing, documents and user-facing messages."""

import asyncio
import logging
import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .errors import OpenFailure
from .models import DirectoryEntry, FileType, TextDocument

logger = logging.getLogger(__name__)

# Bytes inspected when deciding whether content is binary.
BINARY_SNIFF_SIZE = 8192


class EditorHost(ABC):
    """Operations the walker and the command dispatcher need from the editor."""

    @abstractmethod
    async def read_directory(self, path: Path) -> List[DirectoryEntry]:
        """List the entries of a directory. Raises OSError on failure."""

    @abstractmethod
    async def stat(self, path: Path) -> FileType:
        """Return the kind of ``path``. Raises OSError on failure."""

    @abstractmethod
    async def open_text_document(self, path: Path) -> TextDocument:
        """Load a file as text. Raises OpenFailure if it cannot be shown."""

    @abstractmethod
    async def show_text_document(self, document: TextDocument, preview: bool = False) -> None:
        """Display a document in a tab."""

    @abstractmethod
    def show_information_message(self, message: str) -> None:
        ...

    @abstractmethod
    def show_error_message(self, message: str) -> None:
        ...

    def active_editor_path(self) -> Optional[Path]:
        """Return the file shown in the active editor, if any."""
        return None


def _scan_directory(path: Path) -> List[DirectoryEntry]:
    entries = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                if entry.is_dir():
                    kind = FileType.DIRECTORY
                elif entry.is_file():
                    kind = FileType.FILE
                else:
                    kind = FileType.UNKNOWN
            except OSError as e:
                logger.debug(f"Cannot determine type of {entry.path}: {e}")
                kind = FileType.UNKNOWN
            entries.append(DirectoryEntry(entry.name, kind))
    return entries


def _stat_kind(path: Path) -> FileType:
    st = path.stat()
    if stat.S_ISDIR(st.st_mode):
        return FileType.DIRECTORY
    if stat.S_ISREG(st.st_mode):
        return FileType.FILE
    return FileType.UNKNOWN


def _read_text(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise OpenFailure(str(e)) from e

    if b"\0" in data[:BINARY_SNIFF_SIZE]:
        raise OpenFailure("File seems to be binary and cannot be opened as text")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise OpenFailure(f"File is not valid UTF-8: {e}") from e


class ConsoleHost(EditorHost):
    """Host backed by the local file system and a rich console.

    Opened documents are collected in ``open_tabs`` in the order their opens
    complete. Messages are printed and kept in ``messages`` as
    ``(level, text)`` pairs.
    """

    def __init__(self, console: Optional[Console] = None, active_file: Optional[Path] = None):
        self.console = console or Console()
        self.active_file = active_file
        self.open_tabs: List[TextDocument] = []
        self.messages: List[Tuple[str, str]] = []

    async def read_directory(self, path: Path) -> List[DirectoryEntry]:
        return await asyncio.to_thread(_scan_directory, Path(path))

    async def stat(self, path: Path) -> FileType:
        return await asyncio.to_thread(_stat_kind, Path(path))

    async def open_text_document(self, path: Path) -> TextDocument:
        text = await asyncio.to_thread(_read_text, Path(path))
        return TextDocument(path=Path(path), text=text)

    async def show_text_document(self, document: TextDocument, preview: bool = False) -> None:
        # Already open documents keep their tab.
        if any(tab.path == document.path for tab in self.open_tabs):
            return
        self.open_tabs.append(document)

    def show_information_message(self, message: str) -> None:
        self.messages.append(("info", message))
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def show_error_message(self, message: str) -> None:
        self.messages.append(("error", message))
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def active_editor_path(self) -> Optional[Path]:
        return self.active_file

    @property
    def has_errors(self) -> bool:
        return any(level == "error" for level, _ in self.messages)
