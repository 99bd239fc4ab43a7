"""Process assertions that run the installed binary."""

import logging
import subprocess
from pathlib import Path
from typing import Literal

from pydantic import Field

from .base import BaseAssertion

logger = logging.getLogger(__name__)


class CommandOutputAssert(BaseAssertion):
    """Assert that running the installed binary prints the expected text.

    Runs the binary with the given arguments, requires a zero exit status and
    checks that stdout contains the expected substring.

    Attributes:
        args: Arguments passed to the binary (default: none)
        expected: Substring that must appear in stdout
        timeout_seconds: Maximum time the command may run (default: 10)

    Example:
        >>> CommandOutputAssert(args=["--help"], expected="Usage")
    """

    kind: Literal["command_output"] = "command_output"
    args: list[str] = Field(default_factory=list)
    expected: str
    timeout_seconds: int = 10

    def check(self, binary_path: Path) -> bool:
        try:
            completed = subprocess.run(
                [str(binary_path), *self.args],
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Command assertion could not run {binary_path}: {e}")
            return False
        return completed.returncode == 0 and self.expected in completed.stdout
