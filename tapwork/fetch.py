"""Release artifact download with httpx."""

import logging
from pathlib import Path

import httpx

from .descriptor import PackageDescriptor
from .errors import DownloadError

logger = logging.getLogger(__name__)

USER_AGENT = "Tapwork-Fetcher/1.0"


class Fetcher:
    """Downloads release archives into a local cache directory.

    A cached file is only a convenience: callers verify its digest exactly
    like a fresh download.

    Attributes:
        cache_dir: Directory downloads are stored in
        timeout: Seconds allowed for each HTTP operation
    """

    def __init__(
        self,
        cache_dir: Path,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ):
        """Initialize the fetcher.

        Args:
            cache_dir: Directory downloads are stored in
            timeout: Seconds allowed for each HTTP operation
            client: Optional preconfigured httpx.Client (used as-is, not closed)
        """
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self._client = client

    def cache_path(self, descriptor: PackageDescriptor) -> Path:
        """Location of the cached artifact for a descriptor."""
        return self.cache_dir / (
            f"{descriptor.name}--{descriptor.version}--{descriptor.artifact_filename}"
        )

    def fetch(self, descriptor: PackageDescriptor, force: bool = False) -> Path:
        """Download the descriptor's artifact, reusing a cached copy if present.

        Args:
            descriptor: Descriptor whose url to download
            force: Download again even when a cached copy exists

        Returns:
            Path to the downloaded artifact

        Raises:
            DownloadError: On HTTP status errors or transport failures
        """
        target = self.cache_path(descriptor)
        if target.exists() and not force:
            logger.info(f"Using cached download {target}")
            return target

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        partial = target.with_name(target.name + ".incomplete")

        logger.info(f"Downloading {descriptor.url}")
        try:
            if self._client is not None:
                self._download(self._client, descriptor.url, partial)
            else:
                with httpx.Client(
                    timeout=self.timeout,
                    follow_redirects=True,
                    headers={"User-Agent": USER_AGENT},
                ) as client:
                    self._download(client, descriptor.url, partial)
        except httpx.HTTPStatusError as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(
                f"Download of {descriptor.url} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Download of {descriptor.url} failed: {e}") from e

        partial.replace(target)
        logger.debug(f"Saved {target} ({target.stat().st_size} bytes)")
        return target

    @staticmethod
    def _download(client: httpx.Client, url: str, destination: Path) -> None:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
