"""
Pytest configuration and fixtures for Tapwork tests.
"""

import hashlib
import io
import shlex
import tarfile
import tempfile
from pathlib import Path

import pytest

import tapwork.settings as settings_module
from tapwork.descriptor import PackageDescriptor


def write_fake_binary(path: Path, output: str, exit_code: int = 0) -> Path:
    """Write a shell script that prints output and exits with exit_code."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"#!/bin/sh\nprintf '%s\\n' {shlex.quote(output)}\nexit {exit_code}\n"
    )
    path.chmod(0o755)
    return path


def fake_binary_source(output: str) -> bytes:
    return f"#!/bin/sh\nprintf '%s\\n' {shlex.quote(output)}\n".encode()


def build_tarball(path: Path, members: dict[str, bytes], mode: int = 0o755) -> Path:
    """Create a .tar.gz at path with the given member names and contents."""
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return path


def sha256_of(path: Path) -> str:
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point Tapwork settings at per-test directories."""
    monkeypatch.setenv("TW_BIN_DIR", str(tmp_path / "bin"))
    monkeypatch.setenv("TW_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("TW_SELFTEST_TIMEOUT", "10")
    monkeypatch.setattr(settings_module, "_settings", None)
    return settings_module.get_settings()


@pytest.fixture
def release_archive(temp_dir):
    """A release tarball containing an iamcommitted binary that reports 0.1.0."""
    return build_tarball(
        temp_dir / "iamcommitted-v0.1.0-macos.tar.gz",
        {"iamcommitted": fake_binary_source("iamcommitted 0.1.0")},
    )


@pytest.fixture
def make_descriptor():
    """Factory for iamcommitted-like descriptors with overridable fields."""

    def _make(**overrides) -> PackageDescriptor:
        fields = {
            "name": "iamcommitted",
            "description": "AI micro bot for generating Git commit messages",
            "homepage": "https://github.com/darkin100/iamcommitted",
            "url": "https://example.com/releases/iamcommitted-v0.1.0-macos.tar.gz",
            "sha256": "0" * 64,
            "version": "0.1.0",
            "license": "MIT",
            "caveats_text": "Please set the OPENAI_API_KEY environment variable.\n",
        }
        fields.update(overrides)
        return PackageDescriptor(**fields)

    return _make
