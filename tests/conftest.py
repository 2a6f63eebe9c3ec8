"""Shared helpers for openfiles tests."""

import io
from pathlib import Path
from typing import Dict, List, Union

import pytest
from rich.console import Console

from openfiles.host import ConsoleHost
from openfiles.models import WalkConfig


class CountingHost(ConsoleHost):
    """ConsoleHost that records which directories were listed."""

    def __init__(self, **kwargs):
        kwargs.setdefault("console", Console(file=io.StringIO(), width=200))
        super().__init__(**kwargs)
        self.listed: List[Path] = []

    async def read_directory(self, path):
        self.listed.append(Path(path))
        return await super().read_directory(path)

    @property
    def opened_names(self) -> List[str]:
        return sorted(document.path.name for document in self.open_tabs)

    def messages_at(self, level: str) -> List[str]:
        return [text for lvl, text in self.messages if lvl == level]


Tree = Dict[str, Union[str, bytes, "Tree"]]


def make_tree(root: Path, tree: Tree) -> None:
    """Create files (str or bytes values) and directories (dict values) under root."""
    for name, content in tree.items():
        path = root / name
        if isinstance(content, dict):
            path.mkdir()
            make_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


def fixed_config(**kwargs):
    """Return a config provider that always yields the same WalkConfig."""
    config = WalkConfig(**kwargs)
    return lambda: config


@pytest.fixture
def host():
    return CountingHost()
