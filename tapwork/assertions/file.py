"""File system assertions for validating installed files."""

import os
from pathlib import Path
from typing import Literal

from .base import BaseAssertion


def _resolve_path_for_assertion(path_str: str, binary_path: Path) -> Path:
    """Resolve a path relative to the directory holding the installed binary.

    Args:
        path_str: Original path (absolute or relative to the binary directory)
        binary_path: Path to the installed executable

    Returns:
        Absolute path to check
    """
    path = Path(path_str)
    if not path.is_absolute():
        path = Path(binary_path).parent / path
    return path


class FileExistsAssert(BaseAssertion):
    """Assert that a file or directory exists at the specified path.

    Attributes:
        path: Absolute path, or path relative to the binary directory

    Example:
        >>> FileExistsAssert(path="iamcommitted")
        >>> FileExistsAssert(path="/usr/local/share/man/man1/tool.1")
    """

    kind: Literal["file_exists"] = "file_exists"
    path: str

    def check(self, binary_path: Path) -> bool:
        try:
            return _resolve_path_for_assertion(self.path, binary_path).exists()
        except OSError:
            return False


class ExecutableAssert(BaseAssertion):
    """Assert that the installed binary is a regular, executable file.

    Example:
        >>> ExecutableAssert()
    """

    kind: Literal["executable"] = "executable"

    def check(self, binary_path: Path) -> bool:
        path = Path(binary_path)
        try:
            return path.is_file() and os.access(path, os.X_OK)
        except OSError:
            return False
