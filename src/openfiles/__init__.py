"""
Openfiles - open every file in a directory at once.

Walks a directory (optionally recursively) and opens its files, skipping
excluded names and folders disabled per workspace root.
"""

__version__ = "0.1.0"

from .commands import CommandDispatcher
from .store import DisabledFolderStore
from .walker import DirectoryWalker

__all__ = ["CommandDispatcher", "DisabledFolderStore", "DirectoryWalker", "__version__"]
