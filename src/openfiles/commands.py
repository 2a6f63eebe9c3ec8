"""User-invoked commands and how their results reach the user."""

import logging
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

from .errors import UnknownCommandError
from .host import EditorHost
from .models import FileType
from .store import DisabledFolderStore
from .walker import DirectoryWalker
from .workspace import Workspace

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "open-files-in-directory"


def create_command_name(name: str) -> str:
    """Return the fully qualified id of a command."""
    return f"{COMMAND_PREFIX}.{name}"


def _folder_name(path: Path) -> str:
    return Path(path).name or "folder"


class CommandDispatcher:
    """Maps command ids to walker and store calls."""

    def __init__(
        self,
        host: EditorHost,
        walker: DirectoryWalker,
        store: DisabledFolderStore,
        workspace: Workspace,
    ):
        self.host = host
        self.walker = walker
        self.store = store
        self.workspace = workspace

    @property
    def commands(self) -> Dict[str, Callable[[Optional[Path]], Awaitable]]:
        return {
            create_command_name("currentDirFiles"): self.open_current_directory_files,
            create_command_name("currentDirFilesRecursively"): self.open_current_directory_files_recursively,
            create_command_name("disableFolder"): self.disable_folder,
            create_command_name("enableFolder"): self.enable_folder,
            create_command_name("toggleFolderDisable"): self.toggle_folder_disable,
        }

    async def execute(self, command_id: str, uri: Optional[Path] = None):
        """Run the command registered under ``command_id``."""
        handler = self.commands.get(command_id)
        if handler is None:
            raise UnknownCommandError(f"Unknown command: {command_id}")
        logger.debug(f"Executing {command_id} with {uri}")
        return await handler(uri)

    def _active_editor_directory(self) -> Optional[Path]:
        active = self.host.active_editor_path()
        if active is None:
            return None
        return Path(active).parent

    async def _open_files(self, uri: Optional[Path], recursive: bool) -> None:
        if uri is None:
            directory = self._active_editor_directory()
            if directory is None:
                self.host.show_error_message("Open a file to open its sibling files")
                return
            uri = directory

        await self.walker.walk(Path(uri), recursive)

    async def open_current_directory_files(self, uri: Optional[Path] = None) -> None:
        await self._open_files(uri, False)

    async def open_current_directory_files_recursively(self, uri: Optional[Path] = None) -> None:
        await self._open_files(uri, True)

    async def _validate_folder(self, uri: Optional[Path]) -> bool:
        """Report the first reason ``uri`` cannot be enabled or disabled."""
        if uri is None:
            self.host.show_error_message("Please select a folder to disable/enable")
            return False

        try:
            kind = await self.host.stat(Path(uri))
        except OSError:
            self.host.show_error_message("Unable to access the selected folder")
            return False

        if kind is not FileType.DIRECTORY:
            self.host.show_error_message("Please select a folder, not a file")
            return False

        if self.workspace.get_workspace_root(Path(uri)) is None:
            self.host.show_error_message("This folder is not part of any workspace")
            return False

        return True

    async def _set_disabled(self, uri: Optional[Path], disable: bool) -> Optional[bool]:
        if not await self._validate_folder(uri):
            return None

        if await self.store.is_disabled(Path(uri)) == disable:
            state = "disabled" if disable else "enabled"
            self.host.show_information_message(f"Folder is already {state}")
            return disable

        action = "disable" if disable else "enable"
        try:
            is_now_disabled = await self.store.toggle(Path(uri))
        except Exception as e:
            self.host.show_error_message(f"Failed to {action} folder: {e}")
            return None

        state = "disabled" if is_now_disabled else "enabled"
        self.host.show_information_message(f'Folder "{_folder_name(uri)}" is now {state}')
        return is_now_disabled

    async def disable_folder(self, uri: Optional[Path] = None) -> Optional[bool]:
        """Disable a folder. Returns the resulting state, or None on error."""
        return await self._set_disabled(uri, True)

    async def enable_folder(self, uri: Optional[Path] = None) -> Optional[bool]:
        """Enable a folder. Returns the resulting state, or None on error."""
        return await self._set_disabled(uri, False)

    async def toggle_folder_disable(self, uri: Optional[Path] = None) -> Optional[bool]:
        """Flip the state of a folder. Returns the resulting state, or None on error."""
        if not await self._validate_folder(uri):
            return None

        try:
            is_now_disabled = await self.store.toggle(Path(uri))
        except Exception as e:
            self.host.show_error_message(f"Failed to toggle folder status: {e}")
            return None

        state = "disabled" if is_now_disabled else "enabled"
        self.host.show_information_message(f'Folder "{_folder_name(uri)}" is now {state}')
        return is_now_disabled
