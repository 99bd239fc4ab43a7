"""Release archive extraction."""

import logging
import tarfile
from pathlib import Path

from .errors import MalformedArtifactError

logger = logging.getLogger(__name__)


def extract_archive(archive_path: Path, dest_dir: Path) -> Path:
    """Extract a tar archive and return the directory to install from.

    Compression (gzip, bzip2, xz) is detected automatically. Members are
    extracted with tarfile's "data" filter: leading slashes are stripped,
    and members escaping dest_dir or special files are rejected.

    When the archive holds a single top-level directory and nothing else,
    that directory is returned so installs see the release contents directly.

    Args:
        archive_path: Downloaded archive
        dest_dir: Empty directory to extract into

    Returns:
        Root directory of the extracted release

    Raises:
        MalformedArtifactError: If the file is not a tar archive or has unsafe members
    """
    archive_path = Path(archive_path)
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)

    if not tarfile.is_tarfile(archive_path):
        raise MalformedArtifactError(f"{archive_path.name} is not a tar archive")

    try:
        with tarfile.open(archive_path, "r:*") as tar:
            tar.extractall(dest_dir, filter="data")
    except tarfile.FilterError as e:
        raise MalformedArtifactError(f"Unsafe member in {archive_path.name}: {e}") from e
    except (tarfile.TarError, EOFError) as e:
        raise MalformedArtifactError(f"Could not extract {archive_path.name}: {e}") from e

    entries = list(dest_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        logger.debug(f"Using single top-level directory {entries[0].name}")
        return entries[0]
    return dest_dir
