"""Exclusion rules for directory entries."""

from typing import Iterable

from .models import FileType


def get_extension(name: str) -> str:
    """Return the lower-cased extension of ``name``, including the dot.

    The extension starts at the last ``.`` in the name, so ``.env`` has the
    extension ``.env`` and ``archive.tar.GZ`` has ``.gz``. Names without a
    dot have no extension and return an empty string.
    """
    index = name.rfind('.')
    if index == -1:
        return ""
    return name[index:].lower()


def should_exclude_directory(dir_name: str, exclude_folders: Iterable[str]) -> bool:
    """Check if a directory name is listed in ``exclude_folders`` (exact match)."""
    return dir_name in exclude_folders


def should_exclude_extension(file_name: str, exclude_extensions: Iterable[str]) -> bool:
    """Check if the extension of ``file_name`` is in ``exclude_extensions``."""
    ext = get_extension(file_name)
    if not ext:
        return False
    return any(ext == excluded.lower() for excluded in exclude_extensions)


def should_process(
    name: str,
    kind: FileType,
    exclude_folders: Iterable[str],
    exclude_extensions: Iterable[str],
) -> bool:
    """Check if an entry should be processed (not excluded)."""
    if kind is FileType.DIRECTORY:
        return not should_exclude_directory(name, exclude_folders)

    return not should_exclude_extension(name, exclude_extensions)
