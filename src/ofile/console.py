"""Console output for the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ofile.types import DeleteResult, Failure


class Reporter:
    """Prints command outcomes with rich."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the reporter.

        Args:
            console: Console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]\u2713[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]\u2717[/red] {escape(message)}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def show_info(self, message: str) -> None:
        """Show info message.

        Args:
            message: Info message.
        """
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def show_failure(self, failure: Failure) -> None:
        """Show a failure and, as a tree, the child failures behind it.

        Args:
            failure: Failure to display.
        """
        if not failure.causes:
            self.show_error(str(failure))
            return
        root = Tree(f"[red]\u2717[/red] {escape(str(failure))}")
        self._add_causes(root, failure)
        self.console.print(root)

    def _add_causes(self, node: Tree, failure: Failure) -> None:
        for cause in failure.causes:
            self._add_causes(node.add(f"[red]{escape(str(cause))}[/red]"), cause)

    def show_delete_result(self, result: DeleteResult) -> None:
        """Show the outcome of a delete, listing descendants that survived.

        Args:
            result: Result to display.
        """
        if result.success:
            self.show_success(f"Deleted {result.path}")
        else:
            self.show_error(f"Could not delete {result.path}: {result.error}")

        if not result.failures:
            return

        table = Table(title=f"{result.failed_count} entries could not be deleted")
        table.add_column("Path", style="cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Reason")
        for failure in result.failures:
            table.add_row(
                escape(str(failure.path or "")),
                failure.kind.value,
                escape(failure.message),
            )
        self.console.print(table)
