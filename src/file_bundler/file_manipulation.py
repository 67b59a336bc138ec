from __future__ import annotations

import base64
import gzip
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from file_bundler.config import COMPRESSION_LEVEL, DEFAULT_MATCHER
from file_bundler.exceptions import InvalidMatcherError
from file_bundler.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterator

# Lets arbitrary bytes (gzip output included) live in a str and come back unchanged.
_TEXT_ERRORS = "surrogateescape"


def relpath(path: Path, root: Path, *, http_paths: bool = False) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from
        http_paths (bool): use ``/`` as separator whatever the platform

    Returns:
        str: the relative path from root to path, with platform separators,
            or POSIX separators when ``http_paths`` is set.
    """
    rel = path.relative_to(root)
    return rel.as_posix() if http_paths else str(rel)


def compile_matcher(matcher: str) -> re.Pattern[str]:
    """Compile the inclusion pattern; an empty pattern matches everything.

    Args:
        matcher (str): a regular expression tested against relative paths

    Raises:
        InvalidMatcherError: if ``matcher`` is not a valid regular expression.

    Returns:
        re.Pattern[str]: the compiled pattern
    """
    pattern = matcher or DEFAULT_MATCHER
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidMatcherError(pattern=pattern, reason=str(exc)) from exc


def read_file(path: Path) -> bytes:
    """Read the whole content of a file.

    Args:
        path (Path): the file to read

    Returns:
        bytes: the file content
    """
    with path.open("rb") as f:
        return f.read()


def compress_data(data: bytes) -> bytes:
    """Gzip ``data`` with best compression and a zero mtime, so equal input gives equal output."""
    return gzip.compress(data, compresslevel=COMPRESSION_LEVEL, mtime=0)


def encode_content(data: bytes, *, plain_text: bool, compress: bool) -> str:
    """Turn raw file bytes into a bundle value.

    Compression is applied first. Plain text values keep the bytes as-is
    (undecodable bytes are carried as lone surrogates); other values are
    standard padded base64.

    Args:
        data (bytes): raw file content
        plain_text (bool): store the bytes as text instead of base64
        compress (bool): gzip the bytes before the text step

    Returns:
        str: the encoded value
    """
    if compress:
        data = compress_data(data)
    if plain_text:
        return data.decode("utf-8", errors=_TEXT_ERRORS)
    return base64.b64encode(data).decode("ascii")


def decode_content(value: str, *, plain_text: bool, compress: bool) -> bytes:
    """Reverse `encode_content` and give back the original file bytes.

    Args:
        value (str): a bundle value
        plain_text (bool): the value was stored as text
        compress (bool): the value was gzipped

    Returns:
        bytes: the original file content
    """
    data = value.encode("utf-8", errors=_TEXT_ERRORS) if plain_text else base64.b64decode(value, validate=True)
    if compress:
        data = gzip.decompress(data)
    return data


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk_files(root: Path) -> Iterator[Path]:
    """Walk the directory tree rooted at `root` and yield every non-directory entry.

    Directories and files are visited in sorted order. Symbolic links to
    directories are not followed but yielded like files, so reading a
    matching one fails with `IsADirectoryError` instead of dropping its content.

    Args:
        root (Path): the root directory to walk

    Raises:
        OSError: if a directory cannot be listed, including a missing root.

    Yields:
        Iterator[Path]: the files found under ``root``
    """
    for dirpath, dirs, files in os.walk(root, onerror=_raise_walk_error):
        dirs.sort()
        links = [d for d in dirs if os.path.islink(os.path.join(dirpath, d))]
        for f in sorted([*files, *links]):
            yield Path(dirpath) / f


def walk_bundle(
    root: Path,
    matcher: re.Pattern[str] | str,
    *,
    plain_text: bool,
    compress: bool,
    http_paths: bool = False,
) -> dict[str, str]:
    """Build a bundle from every file under ``root`` whose relative path matches ``matcher``.

    The pattern is searched (not anchored) in the path relative to ``root``.
    Any filesystem error aborts the walk.

    Args:
        root (Path): the directory to bundle
        matcher (re.Pattern[str] | str): the inclusion pattern
        plain_text (bool): see `encode_content`
        compress (bool): see `encode_content`
        http_paths (bool): key files with ``/`` separators

    Returns:
        dict[str, str]: relative path to encoded content
    """
    pattern = compile_matcher(matcher) if isinstance(matcher, str) else matcher
    bundle: dict[str, str] = {}
    for path in walk_files(root):
        key = relpath(path, root, http_paths=http_paths)
        if not pattern.search(key):
            continue
        raw = read_file(path)
        bundle[key] = encode_content(raw, plain_text=plain_text, compress=compress)
        logger.debug("bundled_file", key=key, size=len(raw))
    logger.info("walk_complete", root=str(root), files=len(bundle))
    return bundle
