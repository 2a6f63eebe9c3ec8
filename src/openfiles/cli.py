"""Command-line interface for openfiles."""

import asyncio
import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.console import Console
from rich.table import Table

from . import __version__
from .commands import CommandDispatcher, create_command_name
from .config import ConfigManager
from .errors import UnknownCommandError
from .host import ConsoleHost
from .store import DisabledFolderStore
from .walker import DirectoryWalker
from .workspace import Workspace, absolute_path

app = typer.Typer(
    name="openfiles",
    help="Open every file in a directory, skipping excluded and disabled folders.",
    rich_markup_mode="rich",
)
console = Console()

RootOption = typer.Option(
    None,
    "--root",
    help="Workspace root (repeatable, defaults to the current directory)",
)
ActiveFileOption = typer.Option(
    None,
    "--active-file",
    help="File shown in the active editor, used when no directory is given",
)
VerboseOption = typer.Option(False, "--verbose", "-V", help="Log debug output to stderr")


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        print(f"[cyan]openfiles[/cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """
    Openfiles - open all files of a directory at once.

    Folders can be disabled per workspace root so that recursive opens skip them.
    """
    pass


def _configure_logging(config_manager: ConfigManager, verbose: bool):
    handlers: List[logging.Handler] = [logging.FileHandler(config_manager.log_file)]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def _build_dispatcher(
    roots: Optional[List[Path]],
    active_file: Optional[Path] = None,
    overrides: Optional[dict] = None,
    verbose: bool = False,
):
    """Wire the host, store, walker and dispatcher for one invocation."""
    config_manager = ConfigManager(overrides=overrides)
    _configure_logging(config_manager, verbose)

    try:
        settings = config_manager.load_settings()
    except ValidationError as e:
        print(f"[red]Error:[/red] Invalid settings\n{e}")
        raise typer.Exit(1)

    workspace = Workspace(roots or [Path.cwd()])
    host = ConsoleHost(
        console=console,
        active_file=absolute_path(active_file) if active_file else None,
    )
    store = DisabledFolderStore(workspace, write_header=settings.write_state_header)
    walker = DirectoryWalker(host, store, config_manager.get_walk_config)
    return host, CommandDispatcher(host, walker, store, workspace)


async def _execute(dispatcher: CommandDispatcher, command_id: str, uri: Optional[Path]):
    result = await dispatcher.execute(command_id, uri)
    await dispatcher.walker.wait_idle()
    return result


def _print_opened(host: ConsoleHost):
    if not host.open_tabs:
        print("[yellow]No files opened[/yellow]")
        return

    table = Table(title="Opened Files")
    table.add_column("#", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("Lines", justify="right")

    for index, document in enumerate(host.open_tabs, start=1):
        table.add_row(str(index), str(document.path), str(len(document.text.splitlines())))

    console.print(table)


def _launch_editor(editor: str, host: ConsoleHost):
    """Hand the opened files to an external editor."""
    if not host.open_tabs:
        return

    cmd = shlex.split(editor) + [str(document.path) for document in host.open_tabs]
    try:
        subprocess.run(cmd, check=False)
    except OSError as e:
        print(f"[red]Error launching editor:[/red] {e}")
        raise typer.Exit(1)


@app.command(name="open", help="Open every file in a directory")
def open_files(
    path: Optional[Path] = typer.Argument(
        None,
        help="Directory to open (defaults to the directory of --active-file)",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Also open files in subdirectories",
    ),
    active_file: Optional[Path] = ActiveFileOption,
    root: Optional[List[Path]] = RootOption,
    max_depth: Optional[int] = typer.Option(None, "--max-depth", min=0, help="Override max_recursive_depth"),
    max_files: Optional[int] = typer.Option(None, "--max-files", min=0, help="Override max_files"),
    exclude_folder: Optional[List[str]] = typer.Option(
        None,
        "--exclude-folder",
        help="Folder name to skip (repeatable, replaces the configured list)",
    ),
    exclude_extension: Optional[List[str]] = typer.Option(
        None,
        "--exclude-extension",
        help="Extension to skip, e.g. .log (repeatable, replaces the configured list)",
    ),
    editor: Optional[str] = typer.Option(
        None,
        "--editor",
        "-e",
        help="Editor command to launch with the opened files",
    ),
    verbose: bool = VerboseOption,
):
    """Open the files of a directory, optionally recursively."""
    overrides = {
        "max_recursive_depth": max_depth,
        "max_files": max_files,
        "exclude_folders": exclude_folder or None,
        "exclude_extensions": exclude_extension or None,
    }
    host, dispatcher = _build_dispatcher(root, active_file, overrides, verbose)

    command = "currentDirFilesRecursively" if recursive else "currentDirFiles"
    uri = absolute_path(path) if path else None
    asyncio.run(_execute(dispatcher, create_command_name(command), uri))

    _print_opened(host)
    if editor:
        _launch_editor(editor, host)

    if host.has_errors:
        raise typer.Exit(1)


def _folder_command(name: str, path: Path, root: Optional[List[Path]], verbose: bool):
    host, dispatcher = _build_dispatcher(root, verbose=verbose)
    asyncio.run(_execute(dispatcher, create_command_name(name), absolute_path(path)))
    if host.has_errors:
        raise typer.Exit(1)


@app.command(name="disable", help="Disable a folder so directory opens skip it")
def disable_folder(
    path: Path = typer.Argument(..., help="Folder to disable"),
    root: Optional[List[Path]] = RootOption,
    verbose: bool = VerboseOption,
):
    """Disable a folder."""
    _folder_command("disableFolder", path, root, verbose)


@app.command(name="enable", help="Enable a previously disabled folder")
def enable_folder(
    path: Path = typer.Argument(..., help="Folder to enable"),
    root: Optional[List[Path]] = RootOption,
    verbose: bool = VerboseOption,
):
    """Enable a folder."""
    _folder_command("enableFolder", path, root, verbose)


@app.command(name="toggle", help="Flip the disabled state of a folder")
def toggle_folder(
    path: Path = typer.Argument(..., help="Folder to toggle"),
    root: Optional[List[Path]] = RootOption,
    verbose: bool = VerboseOption,
):
    """Toggle a folder between enabled and disabled."""
    _folder_command("toggleFolderDisable", path, root, verbose)


@app.command(name="list", help="List disabled folders")
def list_disabled(
    root: Optional[List[Path]] = RootOption,
):
    """List the disabled folders of every workspace root."""
    workspace = Workspace(root or [Path.cwd()])
    store = DisabledFolderStore(workspace)

    table = Table(title="Disabled Folders")
    table.add_column("Root", style="cyan")
    table.add_column("Folder", style="yellow")

    count = 0
    for workspace_root in workspace.roots:
        for folder in asyncio.run(store.read_disabled_folders(workspace_root)):
            table.add_row(str(workspace_root), folder or ".")
            count += 1

    if count == 0:
        print("[yellow]No disabled folders[/yellow]")
        return

    console.print(table)


@app.command(name="run", help="Run a command by its id")
def run_command(
    command_id: str = typer.Argument(..., help="Command id, e.g. open-files-in-directory.currentDirFiles"),
    uri: Optional[Path] = typer.Argument(None, help="Folder the command applies to"),
    active_file: Optional[Path] = ActiveFileOption,
    root: Optional[List[Path]] = RootOption,
    verbose: bool = VerboseOption,
):
    """Invoke a command the way an editor keybinding or menu would."""
    host, dispatcher = _build_dispatcher(root, active_file, verbose=verbose)

    try:
        asyncio.run(_execute(dispatcher, command_id, absolute_path(uri) if uri else None))
    except UnknownCommandError as e:
        print(f"[red]Error:[/red] {e}")
        print(f"Available commands: {', '.join(dispatcher.commands)}")
        raise typer.Exit(1)

    if host.open_tabs:
        _print_opened(host)
    if host.has_errors:
        raise typer.Exit(1)


@app.command(name="config", help="Show the effective settings")
def show_config():
    """Show the effective settings and where they come from."""
    config_manager = ConfigManager()

    try:
        settings = config_manager.load_settings()
    except ValidationError as e:
        print(f"[red]Error:[/red] Invalid settings\n{e}")
        raise typer.Exit(1)

    table = Table(title="Settings")
    table.add_column("Name", style="cyan")
    table.add_column("Value", style="green")

    for name, value in settings.model_dump().items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(name, str(value))

    console.print(table)
    print(f"[cyan]Settings file:[/cyan] {config_manager.settings_file}")
    print(f"[cyan]Log file:[/cyan] {config_manager.log_file}")


if __name__ == "__main__":
    app()
