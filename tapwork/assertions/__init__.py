"""Tapwork assertions module for validating installed binaries.

Assertions run after the version self-test of a package descriptor and give
formulas extra post-install checks.

Assertion Categories:
    - File: File existence, executable bit
    - Process: Command output of the installed binary

Example:
    >>> from tapwork.assertions import CommandOutputAssert, ExecutableAssert
    >>> from tapwork.descriptor import PackageDescriptor
    >>>
    >>> tool = PackageDescriptor(
    ...     name="tool",
    ...     ...,
    ...     assertions=[
    ...         ExecutableAssert(),
    ...         CommandOutputAssert(args=["--help"], expected="Usage"),
    ...     ]
    ... )
"""

from typing import Annotated, Union

from pydantic import Field

# Base assertion class
from .base import BaseAssertion

# File assertions
from .file import (
    ExecutableAssert,
    FileExistsAssert,
)

# Process assertions
from .process import CommandOutputAssert

# Discriminated union used by descriptors so JSON formulas can declare assertions
AnyAssertion = Annotated[
    Union[FileExistsAssert, ExecutableAssert, CommandOutputAssert],
    Field(discriminator="kind"),
]

__all__ = [
    "AnyAssertion",
    # Base
    "BaseAssertion",
    # Process
    "CommandOutputAssert",
    # File
    "ExecutableAssert",
    "FileExistsAssert",
]
