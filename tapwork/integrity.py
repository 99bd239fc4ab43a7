"""Artifact integrity checks based on SHA-256 digests."""

import hashlib
import logging
import re
from pathlib import Path

from .errors import IntegrityError

logger = logging.getLogger(__name__)

_SHA256_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")
_CHUNK_SIZE = 1024 * 1024


def is_sha256(value: str) -> bool:
    """Return True if value looks like a hex-encoded SHA-256 digest.

    Example:
        >>> is_sha256("e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855")
        True
        >>> is_sha256("REPLACE_WITH_ACTUAL_SHA256_AFTER_FIRST_RELEASE")
        False
    """
    return bool(_SHA256_PATTERN.match(value or ""))


def sha256_file(path: Path) -> str:
    """Compute the lowercase hex SHA-256 of a file, reading it in chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_digest(path: Path, expected: str) -> str:
    """Verify that the file at path hashes to the expected SHA-256 digest.

    A declared digest that is not a valid SHA-256 value can never match, so
    it is rejected the same way as a mismatch.

    Args:
        path: Downloaded artifact to check
        expected: Declared hex digest

    Returns:
        The computed digest

    Raises:
        IntegrityError: If expected is not a SHA-256 digest or does not match
    """
    path = Path(path)
    if not is_sha256(expected):
        raise IntegrityError(
            f"Declared checksum {expected!r} is not a valid SHA-256 digest; "
            f"refusing to install {path.name}"
        )

    actual = sha256_file(path)
    if actual != expected.lower():
        raise IntegrityError(
            f"SHA-256 mismatch for {path.name}\n"
            f"  Expected: {expected.lower()}\n"
            f"    Actual: {actual}"
        )

    logger.debug(f"Verified SHA-256 of {path.name}: {actual}")
    return actual
