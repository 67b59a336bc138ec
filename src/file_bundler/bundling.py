from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from file_bundler.file_manipulation import compile_matcher, walk_bundle
from file_bundler.remapping import prefix_keys, remap

if TYPE_CHECKING:
    from collections.abc import Mapping


def bundle_directory(
    directory: str | Path,
    matcher: str = "",
    prefix: str = "",
    *,
    plain_text: bool = False,
    compress: bool = False,
    http_paths: bool = False,
    mapping: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Bundle the files under ``directory`` into a key to content mapping.

    Keys are built as ``[prefix/]path-relative-to-directory``. The steps run in
    a fixed order: the matcher selects files, ``mapping`` renames keys, then
    ``prefix`` is joined in front of every key (renamed ones included).

    Example:
        Given a directory holding ``bacon.json`` and ``usage.txt``,
        ``bundle_directory(d, matcher=r".*\\.json$", prefix="FILE")`` returns a
        single ``FILE/bacon.json`` entry.

    Args:
        directory (str | Path): the root directory to bundle
        matcher (str): regular expression tested against relative paths; empty matches everything
        prefix (str): path segment joined in front of every key; empty means none
        plain_text (bool): store contents as text instead of base64
        compress (bool): gzip contents with best compression
        http_paths (bool): use ``/`` as key separator whatever the platform
        mapping (Mapping[str, str] | None): explicit ``old -> new`` key overrides

    Raises:
        InvalidMatcherError: if ``matcher`` is not a valid regular expression.
        BundleKeyCollisionError: if renaming or prefixing would overwrite an entry.
        OSError: if the directory cannot be walked or a file cannot be read.

    Returns:
        dict[str, str]: the bundle
    """
    root = Path(directory).absolute()
    pattern = compile_matcher(matcher)
    bundle = walk_bundle(root, pattern, plain_text=plain_text, compress=compress, http_paths=http_paths)
    bundle = remap(bundle, mapping or {})
    if prefix:
        bundle = prefix_keys(bundle, prefix, http_paths=http_paths)
    return bundle
