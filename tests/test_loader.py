"""Tests for descriptor loading."""

import json
from pathlib import Path

import pytest

from tapwork.errors import ConfigurationError
from tapwork.formulas import iamcommitted
from tapwork.loader import load_descriptor

DESCRIPTOR_FIELDS = {
    "name": "sometool",
    "description": "Some tool",
    "homepage": "https://example.com/sometool",
    "url": "https://example.com/sometool-1.2.3.tar.gz",
    "sha256": "b" * 64,
    "version": "1.2.3",
    "license": "Apache-2.0",
}


def test_load_builtin():
    assert load_descriptor("iamcommitted") is iamcommitted


def test_builtin_iamcommitted_metadata():
    assert iamcommitted.version == "0.1.0"
    assert iamcommitted.license == "MIT"
    assert iamcommitted.url.endswith("/v0.1.0/iamcommitted-v0.1.0-macos.tar.gz")
    assert iamcommitted.has_valid_digest is False
    assert "OPENAI_API_KEY" in iamcommitted.caveats()


def test_load_json(temp_dir):
    fields = {
        **DESCRIPTOR_FIELDS,
        "assertions": [
            {"kind": "executable"},
            {"kind": "command_output", "args": ["--help"], "expected": "Usage"},
        ],
    }
    path = temp_dir / "sometool.json"
    path.write_text(json.dumps(fields))

    descriptor = load_descriptor(str(path))

    assert descriptor.name == "sometool"
    assert descriptor.binary == "sometool"
    assert [a.kind for a in descriptor.assertions] == ["executable", "command_output"]


def test_load_invalid_json(temp_dir):
    path = temp_dir / "broken.json"
    path.write_text(json.dumps({**DESCRIPTOR_FIELDS, "url": "ftp://nope"}))

    with pytest.raises(ConfigurationError, match="Invalid descriptor"):
        load_descriptor(str(path))


def test_load_python(temp_dir):
    path = temp_dir / "sometool.py"
    path.write_text(
        "from tapwork.descriptor import PackageDescriptor\n"
        f"tool = PackageDescriptor(**{DESCRIPTOR_FIELDS!r})\n"
    )

    assert load_descriptor(str(path)).version == "1.2.3"


def test_load_python_without_descriptor(temp_dir):
    path = temp_dir / "empty.py"
    path.write_text("x = 1\n")

    with pytest.raises(ConfigurationError, match="No package descriptor"):
        load_descriptor(str(path))


def test_load_python_with_two_descriptors(temp_dir):
    path = temp_dir / "two.py"
    path.write_text(
        "from tapwork.descriptor import PackageDescriptor\n"
        f"a = PackageDescriptor(**{DESCRIPTOR_FIELDS!r})\n"
        f"b = a.model_copy(update={{'name': 'other'}})\n"
    )

    with pytest.raises(ConfigurationError, match="found 2"):
        load_descriptor(str(path))


@pytest.mark.parametrize(
    "source",
    [
        "x = undefined_name\n",
        "def broken(:\n",
        "import tapwork_no_such_module\n",
    ],
    ids=["name-error", "syntax-error", "import-error"],
)
def test_load_python_that_fails_to_run(temp_dir, source):
    path = temp_dir / "bad.py"
    path.write_text(source)

    with pytest.raises(ConfigurationError, match="Error loading"):
        load_descriptor(str(path))


def test_load_json_with_invalid_encoding(temp_dir):
    path = temp_dir / "latin1.json"
    path.write_bytes(b"{\"name\": \"caf\xe9\"}")

    with pytest.raises(ConfigurationError, match="Could not read"):
        load_descriptor(str(path))


def test_unknown_reference():
    with pytest.raises(ConfigurationError, match="Unknown formula"):
        load_descriptor("does-not-exist")


def test_unsupported_file_type(temp_dir):
    path = temp_dir / "formula.yaml"
    path.write_text("name: x\n")

    with pytest.raises(ConfigurationError, match="Unsupported"):
        load_descriptor(str(path))


def test_load_example_formula():
    example = Path(__file__).parent.parent / "examples" / "custom-formula" / "main.py"

    descriptor = load_descriptor(str(example))

    assert descriptor.name == "ripgrep"
    assert descriptor.binary == "rg"
    assert len(descriptor.assertions) == 2
