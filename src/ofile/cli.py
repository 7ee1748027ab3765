"""CLI commands using Typer."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ofile import __version__
from ofile.console import Reporter
from ofile.context import create_context
from ofile.selftest import BugTester, speed_demo
from ofile.types import Failure

if TYPE_CHECKING:
    from ofile.context import AppContext
    from ofile.handle import OFile

app = typer.Typer(
    name="ofile",
    help="Read, write, compare, copy, rename and delete files and directory trees",
    no_args_is_help=True,
)

reporter = Reporter()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        reporter.console.print(f"ofile v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log debug output to stderr")
    ] = False,
    settings: Annotated[
        Path | None, typer.Option("--settings", "-s", help="JSON settings file")
    ] = None,
) -> None:
    """Read, write, compare, copy, rename and delete files and directory trees."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    ctx.obj = {"settings_file": settings}


# ============================================================================
# Helpers
# ============================================================================


def _settings_file() -> Path | None:
    """Settings file given to the top-level callback of the running invocation."""
    click_ctx = click.get_current_context(silent=True)
    if click_ctx is None or not isinstance(click_ctx.obj, dict):
        return None
    return click_ctx.obj.get("settings_file")


def _get_context(context: AppContext | None) -> AppContext:
    """Return the injected context or build the production one.

    Raises:
        typer.Exit: If the settings file cannot be loaded.
    """
    if context is not None:
        return context
    try:
        return create_context(_settings_file())
    except (FileNotFoundError, ValueError) as e:
        reporter.show_error(str(e))
        raise typer.Exit(1) from e


def _open_existing(ctx: AppContext, path: str) -> OFile:
    """Open a handle on a path that must already exist.

    Handles create missing entries, so existence is checked first.

    Raises:
        typer.Exit: If nothing exists at path.
    """
    if not ctx.filesystem.exists(Path(path)):
        reporter.show_error(f"No such file or directory: {path}")
        raise typer.Exit(1)
    return ctx.open(path)


def _fail(failure: Failure) -> None:
    """Report a failure and exit with status 1."""
    reporter.show_failure(failure)
    raise typer.Exit(1)


# ============================================================================
# File Commands
# ============================================================================


@app.command()
def checksum(
    path: Annotated[str, typer.Argument(help="File to checksum")],
    _context=None,
) -> None:
    """Print the checksum of a file."""
    ctx = _get_context(_context)
    handle = _open_existing(ctx, path)

    digest = handle.get_checksum()
    if isinstance(digest, Failure):
        _fail(digest)
    reporter.console.print(f"{digest.hex()}  {escape(path)}", highlight=False)


@app.command()
def equals(
    first: Annotated[str, typer.Argument(help="First file or directory")],
    second: Annotated[str, typer.Argument(help="Second file or directory")],
    ignore_name: Annotated[
        bool, typer.Option("--ignore-name", "-i", help="Compare content and structure only")
    ] = False,
    _context=None,
) -> None:
    """Compare two files or directory trees by checksum."""
    ctx = _get_context(_context)
    a = _open_existing(ctx, first)
    b = _open_existing(ctx, second)

    if a.equals(b, name_sensitive=not ignore_name):
        reporter.show_success(f"{first} and {second} are equal")
    else:
        reporter.show_warning(f"{first} and {second} differ")
        raise typer.Exit(1)


@app.command()
def copy(
    source: Annotated[str, typer.Argument(help="File or directory to copy")],
    destination: Annotated[str, typer.Argument(help="Path of the copy")],
    no_replace: Annotated[
        bool, typer.Option("--no-replace", help="Fail instead of overwriting existing files")
    ] = False,
    _context=None,
) -> None:
    """Copy a file or directory tree."""
    ctx = _get_context(_context)
    handle = _open_existing(ctx, source)

    result = handle.copy(destination, replace=not no_replace)
    if isinstance(result, Failure):
        _fail(result)
    reporter.show_success(f"Copied {source} to {result.path}")


@app.command()
def rename(
    path: Annotated[str, typer.Argument(help="File or directory to rename")],
    new_name: Annotated[str, typer.Argument(help="New name within the same directory")],
    _context=None,
) -> None:
    """Rename a file or directory in place."""
    ctx = _get_context(_context)
    handle = _open_existing(ctx, path)

    result = handle.rename_to(new_name)
    if isinstance(result, Failure):
        _fail(result)
    reporter.show_success(f"Renamed {path} to {result.path}")


@app.command()
def delete(
    path: Annotated[str, typer.Argument(help="File or directory to delete")],
    _context=None,
) -> None:
    """Delete a file or a directory tree."""
    ctx = _get_context(_context)
    handle = _open_existing(ctx, path)

    result = handle.delete()
    reporter.show_delete_result(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def lines(
    path: Annotated[str, typer.Argument(help="File to count lines in")],
    _context=None,
) -> None:
    """Print the number of lines in a file."""
    ctx = _get_context(_context)
    handle = _open_existing(ctx, path)

    count = handle.count_lines()
    if isinstance(count, Failure):
        _fail(count)
    reporter.console.print(f"{count}  {escape(path)}", highlight=False)


# ============================================================================
# Demonstration Commands
# ============================================================================


@app.command()
def selftest(
    workdir: Annotated[
        Path | None, typer.Option("--workdir", "-w", help="Scratch directory (temporary if unset)")
    ] = None,
    _context=None,
) -> None:
    """Run the bundled OFile scenario suite."""
    ctx = _get_context(_context)
    if workdir is None:
        with tempfile.TemporaryDirectory(prefix="ofile-selftest-") as tmp:
            report = BugTester(Path(tmp), console=reporter.console, context=ctx).run()
    else:
        report = BugTester(workdir, console=reporter.console, context=ctx).run()

    if not report.passed:
        raise typer.Exit(1)


@app.command()
def benchmark(
    num_lines: Annotated[
        int, typer.Option("--lines", "-n", min=1, help="Lines to write and read back")
    ] = 1_000_000,
    workdir: Annotated[
        Path | None, typer.Option("--workdir", "-w", help="Scratch directory (temporary if unset)")
    ] = None,
    _context=None,
) -> None:
    """Time bulk line writes and reads."""
    ctx = _get_context(_context)
    if workdir is None:
        with tempfile.TemporaryDirectory(prefix="ofile-benchmark-") as tmp:
            speed_demo(Path(tmp), num_lines, console=reporter.console, context=ctx)
    else:
        speed_demo(workdir, num_lines, console=reporter.console, context=ctx)
