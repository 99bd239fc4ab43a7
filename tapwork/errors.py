"""
Tapwork errors.
"""


class TapworkError(Exception):
    """Base exception for all Tapwork errors."""
    pass


class ConfigurationError(TapworkError):
    """Errors in configuration or descriptor sources."""
    pass


class DownloadError(TapworkError):
    """Errors while fetching a release artifact."""
    pass


class IntegrityError(TapworkError):
    """Declared digest is invalid or does not match the artifact."""
    pass


class MalformedArtifactError(TapworkError):
    """Artifact is not a usable archive or lacks the expected executable."""
    pass


class SelfTestError(TapworkError):
    """Post-install self-test could not confirm the installation."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class VersionMismatchError(SelfTestError):
    """Installed binary did not report the expected version string."""

    def __init__(self, expected: str, output: str):
        super().__init__(
            f"Version mismatch: expected {expected!r} in output, got {output.strip()!r}",
            output=output,
        )
        self.expected = expected
