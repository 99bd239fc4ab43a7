"""
Tapwork - Fetch, verify, install and smoke-test prebuilt binaries.

A package descriptor holds the metadata of one release (download URL,
SHA-256 digest, version, license, caveats) plus its install and self-test
hooks. Tapwork drives the runtime side: download, digest verification,
extraction into the binary directory, and the post-install version check.
"""

from .core import TapworkCore
from .descriptor import PackageDescriptor, SelfTestResult
from .settings import TapworkSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "PackageDescriptor",
    "SelfTestResult",
    "TapworkCore",
    "TapworkSettings",
    "get_settings",
    "reload_settings",
]
