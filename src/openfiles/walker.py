"""Bounded recursive walk that opens every file of a directory."""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Set

from .filters import should_process
from .host import EditorHost
from .models import FileType, WalkConfig, WalkState
from .store import DisabledFolderStore

logger = logging.getLogger(__name__)

ConfigProvider = Callable[[], WalkConfig]
OpenFailureHook = Callable[[Path, Exception], None]


def log_open_failure(path: Path, error: Exception) -> None:
    """Default open failure hook: binary files and the like only reach the log."""
    logger.debug(f"Can't open [{path.name}]. Error: {error}")


class DirectoryWalker:
    """Walk directories and open their files in the host.

    Subdirectory walks and file opens are scheduled as tasks and not awaited
    by the visit that started them. The ``file_count`` handed to a child walk
    is the count at scheduling time, so ``max_files`` only bounds each branch
    approximately. Use :meth:`wait_idle` to wait for everything started so far.
    """

    def __init__(
        self,
        host: EditorHost,
        store: DisabledFolderStore,
        config_provider: ConfigProvider,
        on_open_failure: Optional[OpenFailureHook] = None,
    ):
        self.host = host
        self.store = store
        self.config_provider = config_provider
        self.on_open_failure = on_open_failure or log_open_failure
        self._pending: Set[asyncio.Task] = set()

    async def walk(self, path: Path, recursive: bool = False, depth: int = 0, file_count: int = 0) -> None:
        """Open the files of ``path``, descending into subdirectories if ``recursive``."""
        path = Path(path)

        if await self.store.is_disabled(path):
            logger.info(f"Skipping disabled folder: {path}")
            return

        config = self.config_provider()

        if depth > config.max_recursive_depth:
            logger.info(f"Reached recursion limit depth: {depth} max_recursive_depth: {config.max_recursive_depth}")
            return

        if file_count > config.max_files:
            logger.info(f"Reached max_files limit: {file_count} max_files: {config.max_files}")
            return

        try:
            entries = await self.host.read_directory(path)
        except OSError as e:
            self.host.show_error_message(f"Can't read Directory. Error: {e.strerror or e}")
            return

        state = WalkState(depth=depth, file_count=file_count)
        # Settings may have changed while listing.
        config = self.config_provider()

        for entry in entries:
            if not should_process(entry.name, entry.kind, config.exclude_folders, config.exclude_extensions):
                logger.debug(f"Excluding {entry.kind.value}: {entry.name}")
                continue

            entry_path = path / entry.name

            if entry.kind is FileType.DIRECTORY:
                if not recursive:
                    continue
                if await self.store.is_disabled(entry_path):
                    logger.info(f"Skipping disabled folder: {entry_path}")
                    continue
                self._spawn(self.walk(entry_path, True, state.depth + 1, state.file_count))
            elif entry.kind is FileType.FILE:
                self._spawn(self._open_file(entry_path, state))
            else:
                logger.debug(f"Skipping {entry_path}: not a regular file")

    async def _open_file(self, path: Path, state: WalkState) -> None:
        try:
            document = await self.host.open_text_document(path)
        except Exception as e:
            self.on_open_failure(path, e)
            return

        state.file_count += 1
        await self.host.show_text_document(document, preview=False)

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Walk task failed: {error}", exc_info=error)

    @property
    def pending(self) -> int:
        """Number of scheduled walks and opens that have not finished."""
        return len(self._pending)

    async def wait_idle(self) -> None:
        """Wait until every scheduled walk and open, including nested ones, is done."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def run(self, path: Path, recursive: bool = False) -> None:
        """Walk ``path`` and wait for the whole walk to finish."""
        await self.walk(path, recursive)
        await self.wait_idle()
