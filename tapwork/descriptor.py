"""Package descriptor - metadata and install/test hooks for one prebuilt binary."""

import logging
import os
import re
import shutil
import subprocess
import time
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .assertions import AnyAssertion
from .errors import MalformedArtifactError, SelfTestError, VersionMismatchError
from .integrity import is_sha256
from .settings import get_settings

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._+@-]*$")
_BINARY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._+@-]*$")


class SelfTestResult(BaseModel):
    """Outcome of a passing self-test.

    Attributes:
        passed: Always True for a returned result (failures raise)
        expected: Version string that was searched for
        output: Captured stdout of the version command
        duration: Seconds the version command took
    """

    passed: bool
    expected: str
    output: str
    duration: float = 0.0


class PackageDescriptor(BaseModel):
    """Descriptor for one installable release of a prebuilt binary.

    A descriptor is authored once per release and never mutated; a new release
    gets a new descriptor. The runtime downloads the artifact at ``url``,
    checks it against ``sha256``, extracts it and hands the extracted root to
    :meth:`install`. :meth:`self_test` then smoke-tests the result.

    Attributes:
        name: Identifier, unique within a package index
        description: One-line summary
        homepage: Project homepage URL
        url: HTTP(S) download URL of the release archive
        sha256: Declared SHA-256 digest of the archive
        version: Release version
        license: License identifier (e.g. "MIT")
        caveats_text: Post-install guidance shown to the user
        binary: Executable name inside the archive (defaults to name)
        version_flag: Argument that makes the binary print its version
        assertions: Extra post-install checks run after the version check

    Example:
        >>> tool = PackageDescriptor(
        ...     name="tool",
        ...     description="Example tool",
        ...     homepage="https://example.com/tool",
        ...     url="https://example.com/tool-1.0.0.tar.gz",
        ...     sha256="e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        ...     version="1.0.0",
        ...     license="MIT",
        ... )
        >>> tool.expected_version_string
        'tool 1.0.0'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    homepage: str
    url: str
    sha256: str = Field(min_length=1)
    version: str
    license: str
    caveats_text: str | None = None
    binary: str
    version_flag: str = "--version"
    assertions: list[AnyAssertion] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_binary(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("binary") and data.get("name"):
            data = {**data, "binary": data["name"]}
        return data

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _NAME_PATTERN.match(value):
            raise ValueError(
                f"invalid package name {value!r}: use lowercase letters, digits, "
                "and . _ + @ - (starting with a letter or digit)"
            )
        return value

    @field_validator("binary")
    @classmethod
    def _check_binary(cls, value: str) -> str:
        if not _BINARY_PATTERN.match(value):
            raise ValueError(
                f"invalid binary name {value!r}: use letters, digits, and . _ + @ - "
                "(starting with a letter or digit)"
            )
        return value

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError(f"invalid version {value!r}: must be non-empty without whitespace")
        return value

    @field_validator("url", "homepage")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"{value!r} is not an http(s) URL")
        return value

    @property
    def has_valid_digest(self) -> bool:
        """True if sha256 is a real digest rather than a template placeholder."""
        return is_sha256(self.sha256)

    @property
    def artifact_filename(self) -> str:
        """File name of the release archive, taken from the URL path."""
        return Path(urlparse(self.url).path).name or f"{self.name}-{self.version}.tar.gz"

    @property
    def expected_version_string(self) -> str:
        return f"{self.binary} {self.version}"

    def install(self, archive_root: Path, bin_dir: Path) -> Path:
        """Copy the executable from an extracted archive into the binary directory.

        Any earlier copy is replaced atomically. Nothing is written when the
        executable is missing from the archive.

        Args:
            archive_root: Root of the already extracted release archive
            bin_dir: Binary directory owned by the runtime

        Returns:
            Path to the installed executable

        Raises:
            MalformedArtifactError: If the archive does not contain the executable
        """
        source = Path(archive_root) / self.binary
        if not source.is_file():
            raise MalformedArtifactError(
                f"Executable {self.binary!r} not found in archive for {self.name} {self.version}"
            )

        bin_dir = Path(bin_dir)
        bin_dir.mkdir(parents=True, exist_ok=True)
        target = bin_dir / self.binary
        staging = bin_dir / f".{self.binary}.tapwork-tmp"

        try:
            shutil.copy2(source, staging)
            staging.chmod(staging.stat().st_mode | 0o755)
            os.replace(staging, target)
        except OSError:
            staging.unlink(missing_ok=True)
            raise

        logger.info(f"Installed {self.name} {self.version} to {target}")
        return target

    def self_test(self, binary_path: Path, timeout: float | None = None) -> SelfTestResult:
        """Run the installed binary with the version flag and check its output.

        Args:
            binary_path: Path to the installed executable
            timeout: Seconds before the command is killed (default: settings.selftest_timeout)

        Returns:
            SelfTestResult for a passing test

        Raises:
            VersionMismatchError: If stdout lacks "<binary> <version>"
            SelfTestError: If the command cannot run, times out, exits non-zero,
                or an extra assertion fails
        """
        if timeout is None:
            timeout = get_settings().selftest_timeout

        expected = self.expected_version_string
        command = [str(binary_path), self.version_flag]
        logger.debug(f"Self-test: running {' '.join(command)}")

        start = time.monotonic()
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            partial = e.stdout or ""
            if isinstance(partial, bytes):
                partial = partial.decode(errors="replace")
            raise SelfTestError(
                f"Self-test for {self.name} timed out after {timeout}s", output=partial
            ) from e
        except OSError as e:
            raise SelfTestError(f"Could not run {binary_path}: {e}") from e
        duration = time.monotonic() - start

        if completed.returncode != 0:
            raise SelfTestError(
                f"`{self.binary} {self.version_flag}` exited with status {completed.returncode}",
                output=completed.stdout + completed.stderr,
            )

        if expected not in completed.stdout:
            raise VersionMismatchError(expected, completed.stdout)

        failed = [a.label() for a in self.assertions if not a.check(Path(binary_path))]
        if failed:
            raise SelfTestError(
                f"Post-install assertions failed for {self.name}: {', '.join(failed)}",
                output=completed.stdout,
            )

        logger.info(f"Self-test passed for {self.name} {self.version}")
        return SelfTestResult(
            passed=True,
            expected=expected,
            output=completed.stdout,
            duration=duration,
        )

    def caveats(self) -> str:
        """Post-install guidance for the user, or an empty string."""
        return self.caveats_text or ""
