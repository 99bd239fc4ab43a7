"""
Built-in package descriptors, keyed by package name.
"""

from tapwork.descriptor import PackageDescriptor

from .iamcommitted import iamcommitted

BUILTIN_FORMULAS: dict[str, PackageDescriptor] = {
    iamcommitted.name: iamcommitted,
}

__all__ = ["BUILTIN_FORMULAS", "iamcommitted"]
