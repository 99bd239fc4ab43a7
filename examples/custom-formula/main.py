"""
Custom Formula Example - Describe a prebuilt binary release for Tapwork.

Install it with:
    tapwork install examples/custom-formula/main.py --archive ./ripgrep.tar.gz
"""

from tapwork.assertions import CommandOutputAssert, ExecutableAssert
from tapwork.descriptor import PackageDescriptor

ripgrep = PackageDescriptor(
    name="ripgrep",
    binary="rg",
    description="Recursively search directories for a regex pattern",
    homepage="https://github.com/BurntSushi/ripgrep",
    url=(
        "https://github.com/BurntSushi/ripgrep/releases/download/14.1.0/"
        "ripgrep-14.1.0-x86_64-unknown-linux-musl.tar.gz"
    ),
    # Replace with the digest published alongside the release
    sha256="REPLACE_WITH_RELEASE_SHA256",
    version="14.1.0",
    license="MIT",
    assertions=[
        ExecutableAssert(),
        CommandOutputAssert(args=["--help"], expected="USAGE"),
    ],
)
