"""Self-test suite for OFile, run through the CodeTester harness.

The scenarios create, copy, rename and delete real files under a working
directory and check every step. ``speed_demo`` times bulk writes and reads.
"""

from __future__ import annotations

import time
from pathlib import Path

from rich.console import Console

from ofile.context import AppContext
from ofile.handle import OFile
from ofile.harness import CodeTester, RunReport
from ofile.types import Failure

DEFAULT_FILE_NAME = "tester.txt"


class BugTester(CodeTester):
    """Checks OFile for bugs inside a scratch working directory."""

    def __init__(
        self,
        workdir: Path,
        file_name: str = DEFAULT_FILE_NAME,
        console: Console | None = None,
        context: AppContext | None = None,
    ) -> None:
        super().__init__(console)
        self.workdir = Path(workdir)
        self.context = context or AppContext()
        self.test_file_name = file_name
        self.test_dir_name = "test_dir"
        self.copy_file_name = "copy_" + file_name
        self.renamed_file_name = "renamed_" + file_name
        self.test_file: OFile | None = None

    def run(self) -> RunReport:
        """Run every scenario, then remove what they left behind."""
        self.workdir.mkdir(parents=True, exist_ok=True)
        try:
            return self.run_tests()
        finally:
            self.cleanup()

    def _path(self, *parts: str, directory: bool = False) -> str:
        path = str(self.workdir.joinpath(*parts))
        return path + "/" if directory else path

    def _open(self, path: str | Path) -> OFile:
        return self.context.open(path)

    def _setup_file(self) -> OFile:
        if self.test_file is None:
            self.test_file = self._open(self._path(self.test_file_name))
        return self.test_file

    def cleanup(self) -> None:
        """Delete the scratch files and directories."""
        if self.test_file is not None:
            self.test_file.close()
        for name in (self.test_file_name, self.copy_file_name):
            if OFile.file_exists(self._path(name)):
                self._open(self._path(name)).delete()
        for suffix in ("", "2", "3", "4"):
            if OFile.file_exists(self._path(self.test_dir_name + suffix)):
                self._open(self._path(self.test_dir_name + suffix, directory=True)).delete()

    # ------------------------------------------------------------------
    # Scenarios
    # ------------------------------------------------------------------

    def _check_creation_and_deletion(self, name: str) -> None:
        self.assert_exists(name, False)

        loko = self._open(name)

        self.assert_exists(loko, True)
        self.assert_empty(loko)

        self.assert_delete(loko)

    def test_file_creation_and_deletion(self) -> None:
        self._check_creation_and_deletion(self._path("loko"))
        self._check_creation_and_deletion(self._path("loko", directory=True))

    def test_file_creation_and_deletion_within_directory(self) -> None:
        file_path = self._path(self.test_dir_name, self.test_file_name)

        self.assert_exists(file_path, False)
        self.assert_exists(self._path(self.test_dir_name), False)

        test_file = self._open(file_path)

        self.assert_exists(file_path, True)
        self.assert_exists(self._path(self.test_dir_name), True)
        self.assert_empty(test_file)

        self.assert_delete(test_file, test_file.get_parent_file())

    def test_read_write(self) -> None:
        test_file = self._setup_file()

        test_file.write("hello world")
        test_file.write(" and goodnight moon.\n")
        test_file.write("new line")

        self.assert_equal(test_file.read(), "hello world and goodnight moon.")
        self.assert_equal(test_file.read(), "new line")
        self.assert_none(test_file.read())
        self.assert_equal(test_file.read_file(), "hello world and goodnight moon.\nnew line")

        self.assert_clear(test_file)

    def test_large_read_write(self) -> None:
        test_file = self._setup_file()
        num_lines = 10_000
        for i in range(num_lines):
            test_file.write(f"Line Num: {i + 1}\n")

        self.assert_equal(test_file.read_file().count("\n"), num_lines)
        self.assert_equal(test_file.count_lines(), num_lines)

        for i in range(num_lines):
            self.assert_equal(test_file.read(), f"Line Num: {i + 1}")

        self.assert_clear(test_file)

    def test_file_copy(self) -> None:
        test_file = self._setup_file()
        copy_path = self._path(self.copy_file_name)
        self.assert_exists(copy_path, False)

        test_file.write("copy this")
        copied = self.assert_replace(test_file, copy_path)

        self.assert_equal(copied.read_file(), test_file.read_file())
        self.assert_equal(copied.get_checksum(), test_file.get_checksum())

        # A changed copy is no longer equal
        copied.clear()
        self.assert_files_equal(copied, test_file, False)
        self.assert_replace(test_file, copy_path)

        copied = self.assert_renaming(copied, self.renamed_file_name)
        self.assert_files_equal(copied, test_file, True)

        self.assert_delete(copied)
        self.assert_clear(test_file)

    def test_file_copy_into_directory(self) -> None:
        test_file = self._setup_file()
        file_path = self._path(self.test_dir_name, self.copy_file_name)

        self.assert_exists(self._path(self.test_dir_name), False)

        test_file.write("something to copy")
        copied = self.assert_replace(test_file, file_path)

        self.assert_equal(copied.read_file(), test_file.read_file())
        self.assert_equal(copied.get_checksum(), test_file.get_checksum())

        self.assert_delete(copied, copied.get_parent_file())
        self.assert_clear(test_file)

    def test_directory_copy_with_file(self) -> None:
        file1_path = self._path(self.test_dir_name, self.copy_file_name)
        file2_path = self._path(self.test_dir_name + "2", self.copy_file_name)

        self.assert_exists(self._path(self.test_dir_name), False)
        self.assert_exists(self._path(self.test_dir_name + "2"), False)

        copy_file1 = self._open(file1_path)
        copy_file1.write("some random\nlines to copy").write("and some more")

        copy_file2 = self.assert_replace(copy_file1, file2_path)
        dir1 = copy_file1.get_parent_file()
        self.assert_files_equal(dir1, copy_file2.get_parent_file(), True)

        copy_file2.write("\nslight modification")
        copy_file2.close()
        self.assert_files_equal(dir1, copy_file2.get_parent_file(), False)

        self.assert_replace(copy_file1, file2_path)
        self.assert_files_equal(dir1, copy_file2.get_parent_file(), True)

        # Names only matter to the name-sensitive comparison
        copy_file2 = self.assert_renaming(copy_file2, self.renamed_file_name)
        dir2 = copy_file2.get_parent_file()
        self.assert_files_equal(dir1, dir2, True)
        self.assert_true(
            not dir1.list_files()[0].equals(dir2.list_files()[0]),
            "Differently named files compared equal by name",
        )

        self.assert_delete(
            self._open(self._path(self.test_dir_name, directory=True)),
            self._open(self._path(self.test_dir_name + "2", directory=True)),
        )

    def test_file_renaming_in_directory(self) -> None:
        file_path = self._path(self.test_dir_name, self.test_file_name)

        self.assert_exists(file_path, False)

        test_file = self._open(file_path).write("text to preserve")
        self.assert_exists(test_file, True)

        renamed = self.assert_renaming(test_file, self.renamed_file_name)
        self.assert_exists(test_file, False)
        self.assert_equal(renamed.read_file(), "text to preserve")

        self.assert_delete(renamed.get_parent_file())

    def test_directory_renaming(self) -> None:
        file_path = self._path(self.test_dir_name, self.test_file_name)

        self.assert_exists(self._path(self.test_dir_name), False)

        directory = self._open(self._path(self.test_dir_name, directory=True))
        self.assert_exists(directory, True)

        temp_file = self._open(file_path)
        temp_file.write("text to preserve")
        self.assert_exists(file_path, True)
        self.assert_equal(temp_file.read_file(), "text to preserve")

        renamed_dir = self.assert_renaming(directory, self.test_dir_name + "2")
        moved_path = self._path(self.test_dir_name + "2", self.test_file_name)
        self.assert_exists(moved_path, True)
        self.assert_equal(self._open(moved_path).read_file(), "text to preserve")

        self.assert_delete(renamed_dir)

    def test_directory_copying(self) -> None:
        file_path = self._path(self.test_dir_name, self.test_file_name)

        self.assert_exists(self._path(self.test_dir_name), False)

        directory = self._open(self._path(self.test_dir_name, directory=True))
        self.assert_exists(directory, True)

        temp_file = self._open(file_path)
        temp_file.write("text to preserve")
        self.assert_exists(file_path, True)
        self.assert_equal(temp_file.read_file(), "text to preserve")

        dir2 = self.assert_replace(directory, self._path(self.test_dir_name + "2"))
        dir3 = self.assert_replace(directory, self._path(self.test_dir_name + "3", "loko"))
        dir4 = self.assert_replace(dir3, self._path(self.test_dir_name + "4", "loko"))
        self.assert_files_equal(dir4, directory, True)
        self.assert_files_equal(self._open(dir4.path / temp_file.name), temp_file, True)

        self.assert_delete(directory, dir2, dir3.get_parent_file(), dir4.get_parent_file())

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def assert_files_equal(self, first: OFile, second: OFile, equal: bool) -> None:
        """Fail unless name-insensitive equality matches ``equal``."""
        self.assert_true(
            first.equals_ignore_name(second) == equal,
            f"{first.path} {'!=' if equal else '=='} {second.path}",
        )

    def assert_empty(self, handle: OFile) -> None:
        """Fail unless the file or directory is empty."""
        if handle.is_dir():
            self.assert_true(
                len(handle.list_files()) == 0, f"Directory {handle.path} is not empty."
            )
        else:
            self.assert_true(len(handle.read_file()) == 0, f"File {handle.path} is not empty.")

    def assert_exists(self, target: OFile | str, exists: bool) -> None:
        """Fail unless the entry's existence matches ``exists``."""
        message = "does not exist" if exists else "already exists"
        if isinstance(target, OFile):
            self.assert_true(target.exists() == exists, f"File {target.path} {message}!")
            target = str(target.path)
        self.assert_true(OFile.file_exists(target) == exists, f"File {target} {message}!")

    def assert_clear(self, handle: OFile) -> None:
        """Clear the file and fail unless it ends up empty."""
        cleared = handle.clear()
        self.assert_true(
            not isinstance(cleared, Failure) and cleared.read_file() == "",
            f"Error clearing file {handle.path}!",
        )

    def assert_delete(self, *handles: OFile) -> None:
        """Delete each entry and fail unless it is gone."""
        for handle in handles:
            result = handle.delete()
            self.assert_true(result.success, f"Error deleting file {handle.path}! {result.error}")
            self.assert_exists(handle, False)

    def assert_renaming(self, handle: OFile, new_name: str) -> OFile:
        """Rename the entry and fail unless the new one exists."""
        renamed = handle.rename_to(new_name)
        self.assert_true(
            not isinstance(renamed, Failure), f"Error renaming file {handle.path}! {renamed}"
        )
        self.assert_exists(renamed, True)
        return renamed

    def assert_replace(self, handle: OFile, new_path: str) -> OFile:
        """Copy the entry over new_path and fail unless the copy equals it."""
        replaced = handle.copy_replace(new_path)
        self.assert_true(
            not isinstance(replaced, Failure), f"Error replacing file {handle.path}! {replaced}"
        )
        self.assert_exists(handle, True)
        self.assert_exists(replaced, True)
        self.assert_files_equal(handle, replaced, True)
        return replaced


def speed_demo(
    workdir: Path,
    num_lines: int,
    console: Console | None = None,
    context: AppContext | None = None,
) -> dict[str, float]:
    """Time writing, whole-file reading and line-by-line reading of a large file.

    Args:
        workdir: Directory for the scratch file.
        num_lines: Lines to write.
        console: Where to print progress.
        context: Filesystem and settings for the scratch file.

    Returns:
        Seconds taken per phase, keyed "write", "read_file" and "read_lines".
    """
    console = console or Console(highlight=False)
    context = context or AppContext()
    handle = context.open(str(Path(workdir) / DEFAULT_FILE_NAME))
    timings: dict[str, float] = {}

    try:
        handle.clear()

        start = time.perf_counter()
        console.print(f"Writing {num_lines:,} lines... ", end="")
        for i in range(num_lines):
            handle.write(f"{i}\n")
        handle.close()
        timings["write"] = time.perf_counter() - start
        console.print(f"done in {timings['write']:f} seconds.")

        start = time.perf_counter()
        console.print("Reading whole file at once to string... ", end="")
        handle.read_file()
        timings["read_file"] = time.perf_counter() - start
        console.print(f"done in {timings['read_file']:f} seconds.")

        start = time.perf_counter()
        console.print("Reading whole file line by line... ", end="")
        for _ in range(num_lines):
            handle.read()
        handle.close()
        timings["read_lines"] = time.perf_counter() - start
        console.print(f"done in {timings['read_lines']:f} seconds.")
    finally:
        handle.close()
        handle.delete()

    return timings
