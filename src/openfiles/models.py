"""Data models for openfiles."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class FileType(Enum):
    """Kind of a directory entry."""

    FILE = "file"
    DIRECTORY = "directory"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DirectoryEntry:
    """A single entry produced by a directory listing."""

    name: str
    kind: FileType


@dataclass
class WalkConfig:
    """Limits and exclusions applied while walking a directory."""

    max_recursive_depth: int = 5
    max_files: int = 100
    exclude_folders: List[str] = field(default_factory=list)
    exclude_extensions: List[str] = field(default_factory=list)


@dataclass
class WalkState:
    """State of one directory visit.

    ``file_count`` is incremented by every successful open in this visit.
    Child visits receive a copy of the value, not this object.
    """

    depth: int = 0
    file_count: int = 0


@dataclass
class TextDocument:
    """A file opened for display."""

    path: Path
    text: str = ""
