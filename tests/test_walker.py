"""Tests for the directory walker."""

import asyncio
import tempfile
from pathlib import Path

from conftest import CountingHost, fixed_config, make_tree

from openfiles.config import ConfigManager
from openfiles.models import WalkConfig
from openfiles.store import DisabledFolderStore
from openfiles.walker import DirectoryWalker
from openfiles.workspace import Workspace

SAMPLE_TREE = {
    "top.txt": "top\n",
    "notes.md": "# notes\n",
    "sub": {
        "inner.txt": "inner\n",
        "deeper": {"deep.txt": "deep\n"},
    },
    "node_modules": {"pkg.js": "module.exports = 1;\n"},
}


def _make_walker(root, host, config_provider, **kwargs):
    store = DisabledFolderStore(Workspace([root]))
    return DirectoryWalker(host, store, config_provider, **kwargs), store


def test_non_recursive_opens_only_top_level(host):
    """Test a non-recursive walk never lists subdirectories."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, _ = _make_walker(root, host, fixed_config())

        asyncio.run(walker.run(root, recursive=False))

        assert host.opened_names == ["notes.md", "top.txt"]
        assert host.listed == [root]
        assert host.messages == []


def test_recursive_respects_excluded_folders(host):
    """Test excluded folders are neither listed nor opened."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, _ = _make_walker(root, host, fixed_config(exclude_folders=["node_modules"]))

        asyncio.run(walker.run(root, recursive=True))

        assert host.opened_names == ["deep.txt", "inner.txt", "notes.md", "top.txt"]
        assert root / "node_modules" not in host.listed
        assert walker.pending == 0


def test_excluded_extension_scenario(host):
    """Test only a.txt opens when .log is excluded."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"a.txt": "a\n", "b.LOG": "b\n"})
        walker, _ = _make_walker(root, host, fixed_config(exclude_extensions=[".log"]))

        asyncio.run(walker.run(root))

        assert host.opened_names == ["a.txt"]


def test_max_recursive_depth_zero(host):
    """Test depth 0 never lists or opens anything below the start folder."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, _ = _make_walker(root, host, fixed_config(max_recursive_depth=0))

        asyncio.run(walker.run(root, recursive=True))

        assert host.opened_names == ["notes.md", "top.txt"]
        assert host.listed == [root]


def test_max_recursive_depth_one(host):
    """Test depth 1 opens the first level of subdirectories only."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, _ = _make_walker(
            root, host, fixed_config(max_recursive_depth=1, exclude_folders=["node_modules"])
        )

        asyncio.run(walker.run(root, recursive=True))

        assert host.opened_names == ["inner.txt", "notes.md", "top.txt"]
        assert root / "sub" / "deeper" not in host.listed


def test_max_files_zero_is_a_soft_cap(host):
    """Test max_files=0 still opens every file of the start folder."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"a.txt": "a", "b.txt": "b", "c.txt": "c"})
        walker, _ = _make_walker(root, host, fixed_config(max_files=0))

        asyncio.run(walker.run(root))

        assert host.opened_names == ["a.txt", "b.txt", "c.txt"]


def test_file_count_above_max_files_stops_before_listing(host):
    """Test a walk entered over the file limit performs no listing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"a.txt": "a"})
        walker, _ = _make_walker(root, host, fixed_config(max_files=0))

        async def walk():
            await walker.walk(root, recursive=True, depth=0, file_count=1)
            await walker.wait_idle()

        asyncio.run(walk())

        assert host.listed == []
        assert host.open_tabs == []


def test_disabled_root_short_circuits(host):
    """Test a disabled start folder is never listed, then walks once enabled."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"src": {"main.py": "print('hi')\n", "lib": {"util.py": "x = 1\n"}}})
        src = root / "src"
        walker, store = _make_walker(root, host, fixed_config())

        assert asyncio.run(store.toggle(src)) is True
        asyncio.run(walker.run(src, recursive=True))

        assert host.listed == []
        assert host.open_tabs == []
        assert host.messages == []

        assert asyncio.run(store.toggle(src)) is False
        asyncio.run(walker.run(src, recursive=True))

        assert host.opened_names == ["main.py", "util.py"]


def test_disabled_subfolder_is_skipped(host):
    """Test a disabled subfolder is skipped while its siblings are opened."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, store = _make_walker(root, host, fixed_config(exclude_folders=["node_modules", ".vscode"]))
        asyncio.run(store.toggle(root / "sub"))

        asyncio.run(walker.run(root, recursive=True))

        assert host.opened_names == ["notes.md", "top.txt"]
        assert root / "sub" not in host.listed


def test_open_failures_are_only_reported_to_the_hook(host):
    """Test binary files go to the failure hook and never to the user."""
    failures = []
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"image.png": b"\x89PNG\r\n\x1a\n\x00\x00", "readme.txt": "hello\n"})
        walker, _ = _make_walker(
            root,
            host,
            fixed_config(),
            on_open_failure=lambda path, error: failures.append(path.name),
        )

        asyncio.run(walker.run(root))

        assert host.opened_names == ["readme.txt"]
        assert failures == ["image.png"]
        assert host.messages == []


def test_unreadable_directory_reports_error(host):
    """Test a listing failure is reported and ends the walk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        walker, _ = _make_walker(root, host, fixed_config())

        asyncio.run(walker.run(root / "missing"))

        errors = host.messages_at("error")
        assert len(errors) == 1
        assert errors[0].startswith("Can't read Directory. Error:")
        assert host.open_tabs == []


def test_config_is_fetched_on_every_visit(host):
    """Test the config provider is queried again for each directory."""
    calls = []

    def provider():
        calls.append(1)
        return WalkConfig(exclude_folders=["node_modules"])

    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, SAMPLE_TREE)
        walker, _ = _make_walker(root, host, provider)

        asyncio.run(walker.run(root, recursive=True))

        # root, sub and sub/deeper are each visited once, with two reads per visit
        assert len(calls) == 6


def test_already_open_documents_are_not_duplicated(host):
    """Test opening the same folder twice keeps one tab per file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        make_tree(root, {"a.txt": "a", "b.txt": "b"})
        walker, _ = _make_walker(root, host, fixed_config())

        asyncio.run(walker.run(root))
        asyncio.run(walker.run(root))

        assert host.opened_names == ["a.txt", "b.txt"]
        assert len(host.listed) == 2


def test_walk_survives_invalid_settings_file(host):
    """Test a settings file with invalid values does not stop the walk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir).resolve()
        root = base / "ws"
        root.mkdir()
        make_tree(root, SAMPLE_TREE)
        manager = ConfigManager(config_dir=base / "config", state_dir=base / "state")
        manager.settings_file.write_text('{"max_files": -1, "exclude_folders": ["node_modules"]}')
        walker, _ = _make_walker(root, host, manager.get_walk_config)

        asyncio.run(walker.run(root, recursive=True))

        # Defaults apply, so node_modules is excluded by the default list too
        assert host.opened_names == ["deep.txt", "inner.txt", "notes.md", "top.txt"]
        assert host.messages == []
