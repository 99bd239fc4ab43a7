"""
Descriptor loading - resolve a reference to a PackageDescriptor.

A reference is either the name of a built-in formula, a path to a JSON
descriptor, or a path to a Python file defining one descriptor.
"""

import importlib.util
import logging
from pathlib import Path

from pydantic import ValidationError

from .descriptor import PackageDescriptor
from .errors import ConfigurationError
from .formulas import BUILTIN_FORMULAS

logger = logging.getLogger(__name__)


def load_descriptor(ref: str) -> PackageDescriptor:
    """Resolve a descriptor reference.

    Args:
        ref: Built-in formula name, or path to a .json or .py descriptor file

    Returns:
        The resolved PackageDescriptor

    Raises:
        ConfigurationError: If the reference cannot be resolved or is invalid
    """
    if ref in BUILTIN_FORMULAS:
        logger.debug(f"Using built-in formula {ref}")
        return BUILTIN_FORMULAS[ref]

    path = Path(ref)
    if not path.exists():
        known = ", ".join(sorted(BUILTIN_FORMULAS))
        raise ConfigurationError(
            f"Unknown formula {ref!r}: not a built-in ({known}) and no such file"
        )

    if path.suffix == ".json":
        return _load_json(path)
    if path.suffix == ".py":
        return _load_python(path)

    raise ConfigurationError(f"Unsupported descriptor file type: {path.name}")


def _load_json(path: Path) -> PackageDescriptor:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e

    try:
        return PackageDescriptor.model_validate_json(text)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid descriptor in {path}:\n{e}") from e


def _load_python(path: Path) -> PackageDescriptor:
    """Execute a Python file and return the single descriptor it defines."""
    spec = importlib.util.spec_from_file_location(f"tapwork_formula_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Could not load {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid descriptor in {path}:\n{e}") from e
    except Exception as e:
        raise ConfigurationError(f"Error loading {path}: {e}") from e

    # Collect all PackageDescriptor instances from module globals
    descriptors = []
    for name, obj in vars(module).items():
        if isinstance(obj, PackageDescriptor):
            descriptors.append(obj)
            logger.debug(f"Found descriptor: {name} ({obj.name})")

    if not descriptors:
        raise ConfigurationError(f"No package descriptor found in {path}")
    if len(descriptors) > 1:
        names = ", ".join(d.name for d in descriptors)
        raise ConfigurationError(
            f"Expected one package descriptor in {path}, found {len(descriptors)}: {names}"
        )
    return descriptors[0]
