"""
Tapwork Core - fetch, verify and install prebuilt binaries from descriptors.

Install Pipeline: Fetch artifact → Verify SHA-256 → Extract → Install binary → Self-test
Test Pipeline: Run the descriptor's self-test against an existing installation
Verify Pipeline: Check a local artifact against the declared digest
"""

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict

from .archive import extract_archive
from .descriptor import PackageDescriptor, SelfTestResult
from .errors import IntegrityError, SelfTestError, TapworkError
from .fetch import Fetcher
from .integrity import verify_digest
from .settings import TapworkSettings, get_settings

logger = logging.getLogger(__name__)


class TapworkCore:
    """Main coordinator for the Tapwork pipeline."""

    def __init__(
        self,
        settings: TapworkSettings | None = None,
        fetcher: Fetcher | None = None,
    ):
        """
        Initialize TapworkCore.

        Args:
            settings: Settings to use (defaults to the global settings)
            fetcher: Fetcher override, mainly for tests
        """
        self.settings = settings or get_settings()
        self.fetcher = fetcher or Fetcher(
            cache_dir=self.settings.cache_dir,
            timeout=self.settings.download_timeout,
        )

        logger.info("TapworkCore initialized")

    def _bin_dir(self, bin_dir: Path | None) -> Path:
        return Path(bin_dir) if bin_dir is not None else self.settings.bin_dir

    def fetch(self, descriptor: PackageDescriptor) -> Path:
        """Download the descriptor's artifact into the cache."""
        return self.fetcher.fetch(descriptor)

    def verify(self, descriptor: PackageDescriptor, archive: Path) -> str:
        """Verify a local artifact against the descriptor's declared digest.

        Returns:
            The computed digest

        Raises:
            IntegrityError: On an invalid declared digest or a mismatch
        """
        return verify_digest(Path(archive), descriptor.sha256)

    def install(
        self,
        descriptor: PackageDescriptor,
        archive: Path | None = None,
        bin_dir: Path | None = None,
        run_test: bool = True,
    ) -> Dict[str, Any]:
        """
        Full pipeline: fetch → verify → extract → install → self-test.

        Digest verification always runs and happens before anything is
        written to the binary directory. A failing self-test does not undo
        the install; it is reported through the "verified" flag.

        Args:
            descriptor: Package to install
            archive: Local artifact to use instead of downloading
            bin_dir: Binary directory override (defaults to settings.bin_dir)
            run_test: Run the self-test after installing

        Returns:
            Dict with installation results

        Raises:
            DownloadError, IntegrityError, MalformedArtifactError: Install aborted
        """
        logger.info(f"Installing {descriptor.name} {descriptor.version}")
        target_dir = self._bin_dir(bin_dir)

        # 1. Obtain the artifact
        artifact = Path(archive) if archive is not None else self.fetch(descriptor)

        # 2. Verify integrity; a fetched artifact that fails is dropped from the cache
        try:
            digest = self.verify(descriptor, artifact)
        except IntegrityError:
            if archive is None:
                logger.warning(f"Removing cached artifact {artifact} after failed verification")
                artifact.unlink(missing_ok=True)
            raise
        logger.info(f"Verified {artifact.name}")

        # 3-4. Extract and install
        with tempfile.TemporaryDirectory(prefix="tapwork-") as staging:
            root = extract_archive(artifact, Path(staging))
            binary_path = descriptor.install(root, target_dir)

        result: Dict[str, Any] = {
            "success": True,
            "name": descriptor.name,
            "version": descriptor.version,
            "binary": str(binary_path),
            "digest": digest,
            "verified": False,
            "test_output": None,
            "test_error": None,
            "caveats": descriptor.caveats(),
        }

        # 5. Self-test
        if run_test:
            try:
                test_result = descriptor.self_test(
                    binary_path, timeout=self.settings.selftest_timeout
                )
                result["verified"] = True
                result["test_output"] = test_result.output
            except SelfTestError as e:
                logger.warning(f"Self-test failed for {descriptor.name}: {e}")
                result["test_error"] = str(e)
                result["test_output"] = e.output

        logger.info(f"Install of {descriptor.name} complete")
        return result

    def test(
        self, descriptor: PackageDescriptor, bin_dir: Path | None = None
    ) -> SelfTestResult:
        """Run the self-test against an existing installation.

        Raises:
            TapworkError: If the package is not installed
            SelfTestError: If the self-test fails
        """
        binary_path = self._bin_dir(bin_dir) / descriptor.binary
        if not binary_path.exists():
            raise TapworkError(
                f"{descriptor.name} is not installed (no {binary_path})"
            )
        return descriptor.self_test(binary_path, timeout=self.settings.selftest_timeout)

    def uninstall(self, descriptor: PackageDescriptor, bin_dir: Path | None = None) -> bool:
        """Remove the installed binary.

        Returns:
            True if a binary was removed, False if none was installed
        """
        binary_path = self._bin_dir(bin_dir) / descriptor.binary
        if not binary_path.exists():
            logger.info(f"{descriptor.name} is not installed")
            return False
        binary_path.unlink()
        logger.info(f"Removed {binary_path}")
        return True
