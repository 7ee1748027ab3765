"""Open files to read and write efficiently and intuitively."""

__version__ = "0.1.0"

from ofile.handle import OFile
from ofile.protocols import FileSystem
from ofile.tree import files_equal, files_equal_ignore_name
from ofile.types import DeleteResult, ErrorKind, Failure

__all__ = [
    "__version__",
    "DeleteResult",
    "ErrorKind",
    "Failure",
    "FileSystem",
    "OFile",
    "files_equal",
    "files_equal_ignore_name",
]
