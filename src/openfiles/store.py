"""Persistence of disabled folders per workspace root.

Each workspace root owns a ``.vscode/folder.json`` file holding a JSON array
of root-relative folder paths. The file may contain comments; they are
stripped on read and never carried back into memory.

The read-modify-write in :meth:`DisabledFolderStore.toggle` takes no lock.
Two toggles racing on the same root can lose one update.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List

from . import jsonc
from .errors import MalformedStateError, NoWorkspaceError
from .workspace import Workspace, normalize_folder_path

logger = logging.getLogger(__name__)

STATE_DIR_NAME = ".vscode"
STATE_FILE_NAME = "folder.json"
STATE_FILE_HEADER = (
    "// Folders skipped by open-files-in-directory.\n"
    "// Paths are relative to the workspace root.\n"
)


def get_state_file(root: Path) -> Path:
    """Return the path of the disabled-folder file for a workspace root."""
    return Path(root) / STATE_DIR_NAME / STATE_FILE_NAME


def parse_disabled_folders(content: str) -> List[str]:
    """Decode the file content into an ordered list of unique paths.

    Raises MalformedStateError if the content is not a JSON(C) array.
    """
    data = jsonc.loads(content)
    if not isinstance(data, list):
        raise MalformedStateError(f"Expected a list, got {type(data).__name__}")
    return list(dict.fromkeys(item for item in data if isinstance(item, str)))


def format_disabled_folders(folders: List[str], header: bool = True) -> str:
    """Serialize folders as pretty-printed JSON, optionally with the header."""
    content = json.dumps(folders, indent=2)
    if header:
        return STATE_FILE_HEADER + content + "\n"
    return content + "\n"


class DisabledFolderStore:
    """Check and toggle the disabled state of folders."""

    def __init__(self, workspace: Workspace, write_header: bool = True):
        self.workspace = workspace
        self.write_header = write_header

    async def read_disabled_folders(self, root: Path) -> List[str]:
        """Read the disabled folders of a root. Missing or bad files read as empty."""
        state_file = get_state_file(root)
        try:
            content = await asyncio.to_thread(state_file.read_text, encoding="utf-8")
            return parse_disabled_folders(content)
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError, MalformedStateError) as e:
            logger.debug(f"Ignoring unreadable state file {state_file}: {e}")
            return []

    async def write_disabled_folders(self, root: Path, folders: List[str]) -> None:
        """Write the disabled folders of a root, creating the state directory."""
        state_file = get_state_file(root)
        content = format_disabled_folders(folders, header=self.write_header)
        await asyncio.to_thread(_write_state_file, state_file, content)

    async def is_disabled(self, path: Path) -> bool:
        """Return whether ``path`` is a disabled folder."""
        root = self.workspace.get_workspace_root(path)
        if root is None:
            return False

        normalized = normalize_folder_path(path, root)
        folders = await self.read_disabled_folders(root)
        return normalized in folders

    async def toggle(self, path: Path) -> bool:
        """Flip the disabled state of ``path``.

        Returns True if the folder is now disabled, False if it is now enabled.
        Raises NoWorkspaceError if ``path`` is outside every workspace root.
        """
        root = self.workspace.get_workspace_root(path)
        if root is None:
            raise NoWorkspaceError(path)

        normalized = normalize_folder_path(path, root)
        folders = await self.read_disabled_folders(root)

        if normalized in folders:
            folders.remove(normalized)
            is_now_disabled = False
        else:
            folders.append(normalized)
            is_now_disabled = True

        await self.write_disabled_folders(root, folders)
        logger.info(f"Folder {normalized or '.'} in {root} is now {'disabled' if is_now_disabled else 'enabled'}")
        return is_now_disabled


def _write_state_file(state_file: Path, content: str) -> None:
    state_file.parent.mkdir(parents=True, exist_ok=True)
    state_file.write_text(content, encoding="utf-8")
