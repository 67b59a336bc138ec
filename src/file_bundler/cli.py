"""
file_bundler — Bundle static files into generated Go source.

Overview
--------
Every file under a source directory whose relative path matches a regular
expression is read, optionally gzipped, stored as base64 (or plain text) and
emitted as a ``map[string]string`` literal in a generated Go file, ready for
``go generate``:

    //go:generate file-bundler -d assets -p assets -o assets/bundle.go

Keys are the paths relative to the source directory. They can be renamed with
``--map OLD=NEW`` or ``--mapping-file`` and then prefixed with ``--prefix``.
``--viper`` additionally registers every entry as a viper default.

Every option can also be set through a ``FILE_BUNDLER_<OPTION>`` environment
variable or a ``.env`` file (e.g. ``FILE_BUNDLER_PACKAGE=assets``); command-line
flags win.

Usage
-----
    file-bundler --package assets --directory static --matcher '.*\\.json$' --gzip
    file-bundler -p assets -d static -x FILE --viper -o config_bundle.go
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from file_bundler import __version__
from file_bundler.bundling import bundle_directory
from file_bundler.config import DEFAULT_MAP_NAME, DEFAULT_MATCHER, DEFAULT_OUTPUT
from file_bundler.exceptions import FileBundlerError
from file_bundler.logging import logger, setup_logging
from file_bundler.output_construction import make_target, render_bundle
from file_bundler.settings import Settings, build_mapping, load_environment

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_map_entry(value: str) -> tuple[str, str]:
    """Parse an ``OLD=NEW`` key override.

    Args:
        value (str): the raw command-line value

    Raises:
        argparse.ArgumentTypeError: if either side is empty or ``=`` is missing.

    Returns:
        tuple[str, str]: the old and new keys
    """
    old, sep, new = value.partition("=")
    if not sep or not old or not new:
        msg = f"expected OLD=NEW, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return old, new


def build_parser() -> argparse.ArgumentParser:
    """Build the ``file-bundler`` argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    p = argparse.ArgumentParser(
        prog="file-bundler",
        description="Bundles files into Go code.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Source directory.",
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path.cwd() / DEFAULT_OUTPUT,
        help="Output file.",
    )
    p.add_argument("-m", "--matcher", type=str, default=DEFAULT_MATCHER, help="File matcher (regular expression).")
    p.add_argument("-x", "--prefix", type=str, default="", help="Key prefix.")
    p.add_argument("-p", "--package", type=str, default="", help="Package name (required).")
    p.add_argument(
        "-t",
        "--plain-text",
        action="store_true",
        help="Save as plain text instead of base64.",
    )
    p.add_argument("-n", "--bundle", type=str, default=DEFAULT_MAP_NAME, help="Name of generated map.")
    p.add_argument("-g", "--gzip", action="store_true", help="Use best gzip compression.")
    p.add_argument("--viper", action="store_true", help="Register entries as viper defaults.")
    p.add_argument(
        "--suppress-errors",
        action="store_true",
        help="Write an empty bundle instead of failing when bundling fails.",
    )
    p.add_argument("--http-paths", action="store_true", help="Use '/' as key separator.")
    p.add_argument(
        "--map",
        type=parse_map_entry,
        action="append",
        default=[],
        metavar="OLD=NEW",
        help="Override a key (repeatable).",
    )
    p.add_argument("--mapping-file", type=Path, default=None, help="YAML mapping of old keys to new keys.")
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every bundled file.")
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse CLI arguments, with environment defaults, into settings.

    Args:
        argv (Sequence[str] | None): Optional CLI args.

    Returns:
        Settings: Parsed settings.
    """
    p = build_parser()
    p.set_defaults(**load_environment())
    args = p.parse_args(argv)
    if not args.package:
        p.error("the following arguments are required: -p/--package")
    return Settings(**vars(args))


def main(argv: Sequence[str] | None = None) -> int:
    """Bundle the source directory and write the generated Go file.

    Args:
        argv (Sequence[str] | None): Optional CLI arguments.

    Returns:
        int: Process exit code.
    """
    settings = parse_args(argv)
    if settings.log_file or settings.verbose:
        setup_logging(settings.log_file or None, level=settings.log_level, force=True)

    target = make_target(settings.package, settings.bundle)
    mapping = build_mapping(settings)
    try:
        bundle = bundle_directory(
            settings.directory,
            matcher=settings.matcher,
            prefix=settings.prefix,
            plain_text=settings.plain_text,
            compress=settings.gzip,
            http_paths=settings.http_paths,
            mapping=mapping,
        )
    except (FileBundlerError, OSError) as e:
        if not settings.suppress_errors:
            raise
        logger.warning("bundling_failed_suppressed", error=str(e), directory=str(settings.directory))
        bundle = {}

    content = render_bundle(target.package, target.name, bundle, shape=settings.shape)
    out_path = Path(settings.output)
    out_path.write_text(content, encoding="utf-8")
    logger.info("bundle_written", output=str(out_path), files=len(bundle), shape=str(settings.shape))

    print(f"Wrote {out_path} files={len(bundle)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
