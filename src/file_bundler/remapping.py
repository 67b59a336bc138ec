"""Key shaping applied to a bundle once the walk is done."""

from __future__ import annotations

import os
import posixpath
from typing import TYPE_CHECKING

from file_bundler.exceptions import BundleKeyCollisionError

if TYPE_CHECKING:
    from collections.abc import Mapping


def remap(bundle: Mapping[str, str], mapping: Mapping[str, str]) -> dict[str, str]:
    """Rename bundle keys following an ``old -> new`` mapping.

    Old keys missing from the bundle are ignored. The input bundle is left
    untouched.

    Args:
        bundle (Mapping[str, str]): the bundle to rename
        mapping (Mapping[str, str]): old key to new key

    Raises:
        BundleKeyCollisionError: if a new key is already taken by another entry,
            or if two old keys are renamed to the same new key.

    Returns:
        dict[str, str]: a new bundle with renamed keys
    """
    renames = {old: new for old, new in mapping.items() if old in bundle}
    out = {key: value for key, value in bundle.items() if key not in renames}
    for old, new in renames.items():
        if new in out:
            raise BundleKeyCollisionError(key=new, source=old)
        out[new] = bundle[old]
    return out


def join_key(prefix: str, key: str, *, http_paths: bool = False) -> str:
    """Join ``prefix`` in front of ``key`` with path semantics.

    The result is normalized and never starts with a separator.
    """
    if http_paths:
        return posixpath.normpath(posixpath.join(prefix, key)).lstrip("/")
    return os.path.normpath(os.path.join(prefix, key)).lstrip(os.sep)


def prefixed_key_remapping(bundle: Mapping[str, str], prefix: str, *, http_paths: bool = False) -> dict[str, str]:
    """Create the ``old -> prefix/old`` mapping covering every key of ``bundle``."""
    return {key: join_key(prefix, key, http_paths=http_paths) for key in bundle}


def prefix_keys(bundle: Mapping[str, str], prefix: str, *, http_paths: bool = False) -> dict[str, str]:
    """Prefix every key of the bundle.

    Prefixing is not idempotent: applying it twice prefixes twice.

    Args:
        bundle (Mapping[str, str]): the bundle to prefix
        prefix (str): a non-empty path segment
        http_paths (bool): join with ``/`` whatever the platform

    Returns:
        dict[str, str]: a new bundle with prefixed keys
    """
    return remap(bundle, prefixed_key_remapping(bundle, prefix, http_paths=http_paths))
