"""Workspace roots and path normalization."""

import os
from pathlib import Path
from typing import Iterable, List, Optional


def absolute_path(path: Path) -> Path:
    """Make ``path`` absolute and collapse ``..`` without following symlinks."""
    return Path(os.path.normpath(Path(path).absolute()))


class Workspace:
    """The set of root folders treated as project boundaries."""

    def __init__(self, roots: Iterable[Path]):
        self.roots: List[Path] = [absolute_path(root) for root in roots]

    def get_workspace_root(self, path: Path) -> Optional[Path]:
        """Return the innermost root containing ``path``, or None."""
        path = absolute_path(path)
        best: Optional[Path] = None
        for root in self.roots:
            if path == root or root in path.parents:
                if best is None or len(root.parts) > len(best.parts):
                    best = root
        return best


def normalize_folder_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` using forward slashes.

    Symlinked folders keep their own name. The root itself normalizes to an
    empty string.
    """
    relative = absolute_path(path).relative_to(absolute_path(root))
    if not relative.parts:
        return ""
    return "/".join(relative.parts)
