"""Tests for the Tapwork CLI."""

import pytest
from typer.testing import CliRunner

from tapwork.cli import app

from .conftest import sha256_of, write_fake_binary

runner = CliRunner()


@pytest.fixture
def descriptor_file(temp_dir, release_archive):
    """JSON descriptor whose digest matches the release archive fixture."""
    path = temp_dir / "iamcommitted.json"
    path.write_text(
        "{"
        '"name": "iamcommitted",'
        '"description": "AI micro bot for generating Git commit messages",'
        '"homepage": "https://github.com/darkin100/iamcommitted",'
        '"url": "https://example.com/iamcommitted-v0.1.0-macos.tar.gz",'
        f'"sha256": "{sha256_of(release_archive)}",'
        '"version": "0.1.0",'
        '"license": "MIT",'
        '"caveats_text": "Set OPENAI_API_KEY"'
        "}"
    )
    return path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Tapwork version" in result.stdout


def test_caveats_builtin():
    result = runner.invoke(app, ["caveats", "iamcommitted"])
    assert result.exit_code == 0
    assert "OPENAI_API_KEY" in result.stdout


def test_info_flags_placeholder_digest():
    result = runner.invoke(app, ["info", "iamcommitted"])
    assert result.exit_code == 0
    assert "iamcommitted" in result.stdout
    assert "placeholder" in result.stdout


def test_render_to_file(temp_dir):
    output = temp_dir / "Formula" / "iamcommitted.rb"
    result = runner.invoke(app, ["render", "iamcommitted", "--output", str(output)])
    assert result.exit_code == 0
    assert output.read_text().startswith("class Iamcommitted < Formula")


def test_render_to_stdout():
    result = runner.invoke(app, ["render", "iamcommitted"])
    assert result.exit_code == 0
    assert "bin.install" in result.stdout


def test_unknown_formula():
    result = runner.invoke(app, ["info", "nope"])
    assert result.exit_code == 1
    assert "Unknown formula" in result.stdout


def test_info_with_broken_python_descriptor(temp_dir):
    path = temp_dir / "bad.py"
    path.write_text("x = undefined_name\n")

    result = runner.invoke(app, ["info", str(path)])

    assert result.exit_code == 1
    assert "Info failed" in result.stdout
    assert "undefined_name" in result.stdout


def test_install_and_test(descriptor_file, release_archive, temp_dir):
    bin_dir = temp_dir / "bin"
    result = runner.invoke(
        app,
        [
            "install",
            str(descriptor_file),
            "--archive",
            str(release_archive),
            "--bin-dir",
            str(bin_dir),
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert "Self-test passed" in result.stdout
    assert "OPENAI_API_KEY" in result.stdout
    assert (bin_dir / "iamcommitted").exists()

    result = runner.invoke(app, ["test", str(descriptor_file), "--bin-dir", str(bin_dir)])
    assert result.exit_code == 0
    assert "Self-test passed" in result.stdout


def test_install_builtin_placeholder_fails(release_archive, temp_dir):
    result = runner.invoke(
        app,
        [
            "install",
            "iamcommitted",
            "--archive",
            str(release_archive),
            "--bin-dir",
            str(temp_dir / "bin"),
        ],
    )
    assert result.exit_code == 1
    assert "Install failed" in result.stdout
    assert not (temp_dir / "bin").exists()


def test_test_mismatch_exits_nonzero(descriptor_file, temp_dir):
    write_fake_binary(temp_dir / "bin" / "iamcommitted", "iamcommitted 0.2.0")
    result = runner.invoke(
        app, ["test", str(descriptor_file), "--bin-dir", str(temp_dir / "bin")]
    )
    assert result.exit_code == 1
    assert "Test failed" in result.stdout


def test_verify(descriptor_file, release_archive):
    result = runner.invoke(app, ["verify", str(descriptor_file), str(release_archive)])
    assert result.exit_code == 0
    assert "Checksum OK" in result.stdout


def test_uninstall(descriptor_file, temp_dir):
    write_fake_binary(temp_dir / "bin" / "iamcommitted", "iamcommitted 0.1.0")
    result = runner.invoke(
        app, ["uninstall", str(descriptor_file), "--bin-dir", str(temp_dir / "bin")]
    )
    assert result.exit_code == 0
    assert not (temp_dir / "bin" / "iamcommitted").exists()
