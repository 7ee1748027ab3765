"""A minimal test harness that runs methods by naming convention.

Subclass CodeTester and define public methods named ``test_<words>``; call
``run_tests()`` to run them in definition order. Each test prints one line
with its outcome, followed by a summary and the traceback of every failure
with the harness's own frames filtered out.
"""

from __future__ import annotations

import logging
import os
import time
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

TEST_METHOD_PREFIX = "test_"

_SKIP_ATTRIBUTE = "__ofile_skip_test__"

__all__ = ["CodeError", "CodeTester", "RunReport", "TEST_METHOD_PREFIX", "skip_test"]


def skip_test(method: Callable) -> Callable:
    """Mark a test method to be reported as skipped instead of run."""
    setattr(method, _SKIP_ATTRIBUTE, True)
    return method


def _is_harness_frame(filename: str) -> bool:
    return os.path.abspath(filename) == os.path.abspath(__file__)


class CodeError:
    """A test failure: the raised exception plus the failing test's name."""

    def __init__(self, error: BaseException, method_name: str) -> None:
        self.error = error
        self.method_name = method_name

    def frames(self) -> list[traceback.FrameSummary]:
        """Traceback frames of the failure, excluding harness frames."""
        return [
            frame
            for frame in traceback.extract_tb(self.error.__traceback__)
            if not _is_harness_frame(frame.filename)
        ]

    def format(self) -> str:
        """Render the filtered traceback."""
        lines = ["Traceback (most recent call last):\n"]
        lines.extend(traceback.format_list(self.frames()))
        lines.extend(traceback.format_exception_only(type(self.error), self.error))
        return "".join(lines)

    def __repr__(self) -> str:
        return f"CodeError({self.method_name!r}, {self.error!r})"


@dataclass
class RunReport:
    """Outcome of a harness run.

    Attributes:
        ok: Tests that passed.
        failed: Tests that raised.
        skipped: Tests marked with skip_test.
        total: Tests run (skipped tests excluded).
        elapsed: Wall time in seconds.
        errors: One CodeError per failed test.
    """

    ok: int = 0
    failed: int = 0
    skipped: int = 0
    total: int = 0
    elapsed: float = 0.0
    errors: list[CodeError] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if no test failed."""
        return self.failed == 0


class CodeTester:
    """Base class for naming-convention test suites."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @staticmethod
    def is_test_method_name(name: str) -> bool:
        """Check whether a method name follows the test naming convention."""
        prefix_length = len(TEST_METHOD_PREFIX)
        return (
            len(name) > prefix_length + 1
            and name.startswith(TEST_METHOD_PREFIX)
            and name[prefix_length].isalpha()
            and name[prefix_length].islower()
        )

    @staticmethod
    def parse_method_name(name: str) -> str:
        """Turn ``test_file_copy`` into ``Test file copy``."""
        words = name[len(TEST_METHOD_PREFIX):].split("_")
        return " ".join(["Test"] + [word.lower() for word in words if word])

    def collect_test_methods(self) -> list[tuple[str, Callable[[], Any]]]:
        """Collect test methods in definition order, base classes first."""
        names: dict[str, None] = {}
        for klass in reversed(type(self).__mro__):
            if klass in (object, CodeTester):
                continue
            for name in vars(klass):
                if self.is_test_method_name(name):
                    names[name] = None

        methods = []
        for name in names:
            method = getattr(self, name)
            if callable(method):
                methods.append((name, method))
        return methods

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run_tests(self) -> RunReport:
        """Run every test method and print the results.

        Returns:
            The RunReport of the run.
        """
        report = RunReport()
        self.console.print("\nRunning tests:\n")

        start = time.perf_counter()
        for name, method in self.collect_test_methods():
            self._run_test(report, name, method)
        report.elapsed = time.perf_counter() - start

        self._print_summary(report)
        return report

    def _run_test(self, report: RunReport, name: str, method: Callable[[], Any]) -> None:
        label = escape(f"{self.parse_method_name(name):<50} --> ")

        if getattr(method, _SKIP_ATTRIBUTE, False):
            self.console.print(f"{label}[yellow]skipped[/yellow]")
            report.skipped += 1
            return

        try:
            method()
        except Exception as e:
            self.console.print(f"{label}[bold red]FAIL[/bold red]")
            logger.debug("Test %s raised %r", name, e)
            report.errors.append(CodeError(e, self.parse_method_name(name)))
            report.failed += 1
        else:
            self.console.print(f"{label}[green]ok[/green]")
            report.ok += 1
        report.total += 1

    def _print_summary(self, report: RunReport) -> None:
        self.console.print()
        if report.passed:
            self.console.print(
                f"[green]All tests passed, in {report.elapsed:f} seconds![/green]"
            )
        else:
            plural = "" if report.failed == 1 else "s"
            self.console.print(
                f"[bold red]!!!! {report.failed} test{plural} failed out of "
                f"{report.total} tests total in {report.elapsed:f} seconds.[/bold red]"
            )
            for error in report.errors:
                self.console.print(f"\n{escape(error.method_name)} -> FAIL\n")
                self.console.print(escape(error.format()), end="")
        self.console.print()

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def assert_true(self, condition: bool, message: str) -> None:
        """Fail with message unless condition holds."""
        if not condition:
            raise AssertionError(message)

    def assert_equal(self, first: Any, second: Any, equal: bool = True) -> None:
        """Fail unless ``first == second`` matches ``equal``."""
        self.assert_true(
            (first == second) == equal,
            f"{first!r} {'!=' if equal else '=='} {second!r}",
        )

    def assert_none(self, obj: Any, none: bool = True) -> None:
        """Fail unless ``obj is None`` matches ``none``."""
        self.assert_true(
            (obj is None) == none,
            f"{obj!r} {'!=' if none else '=='} None",
        )
