"""Base assertion classes for Tapwork."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class BaseAssertion(BaseModel):
    """Base class for all type-safe post-install assertions.

    Assertions validate that an installed binary is in the expected state.
    They run after the version self-test of a PackageDescriptor.

    Attributes:
        description: Optional human-readable description of what this assertion checks

    Example:
        >>> class MyAssertion(BaseAssertion):
        ...     description: str = "Check file exists"
    """

    description: Optional[str] = None

    def check(self, binary_path: Path) -> bool:
        """Check if this assertion passes for the given installed binary.

        Args:
            binary_path: Path to the installed executable

        Returns:
            True if assertion passes, False otherwise
        """
        raise NotImplementedError("Subclasses must implement check()")

    def label(self) -> str:
        """Description used when reporting a failed assertion."""
        return self.description or self.__class__.__name__
