from __future__ import annotations

import io
from typing import TYPE_CHECKING

from pydantic import ValidationError

from file_bundler.config import (
    BUNDLE_RENDERER,
    DEFAULT_MAP_NAME,
    GENERATED_MARKER,
    VIPER_IMPORT,
    BundleTarget,
    OutputShape,
    register_renderer,
)
from file_bundler.exceptions import InvalidTargetError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from typing import TextIO

_GO_ESCAPES: dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    '"': '\\"',
    "\\": "\\\\",
}

# str.decode(..., "surrogateescape") maps an undecodable byte 0xNN to U+DCNN.
_ESCAPED_BYTE_LOW = 0xDC80
_ESCAPED_BYTE_HIGH = 0xDCFF
_ASCII_END = 0x80
_BMP_END = 0x10000


def quote_go_string(text: str) -> str:
    """Quote ``text`` as a Go interpreted string literal.

    Quotes, backslashes and control characters are escaped; printable
    characters are kept as UTF-8. Surrogate-escaped bytes come out as
    ``\\xNN`` so that the Go string holds the original byte.

    Args:
        text (str): the text to quote

    Returns:
        str: the double-quoted Go literal
    """
    out = io.StringIO()
    out.write('"')
    for ch in text:
        code = ord(ch)
        if ch in _GO_ESCAPES:
            out.write(_GO_ESCAPES[ch])
        elif _ESCAPED_BYTE_LOW <= code <= _ESCAPED_BYTE_HIGH:
            out.write(f"\\x{code & 0xFF:02x}")
        elif ch.isprintable():
            out.write(ch)
        elif code < _ASCII_END:
            out.write(f"\\x{code:02x}")
        elif code < _BMP_END:
            out.write(f"\\u{code:04x}")
        else:
            out.write(f"\\U{code:08x}")
    out.write('"')
    return out.getvalue()


def make_target(package: str, name: str = DEFAULT_MAP_NAME) -> BundleTarget:
    """Validate the package and map names of the generated file.

    Args:
        package (str): Go package name
        name (str): Go variable name of the map

    Raises:
        InvalidTargetError: if either name is not a usable Go identifier.

    Returns:
        BundleTarget: the validated target
    """
    try:
        return BundleTarget(package=package, name=name)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err["loc"] else "target"
        raise InvalidTargetError(field=field, value=str(err.get("input", "")), reason=err["msg"]) from exc


def write_header(out: io.StringIO, package: str, imports: Sequence[str] = ()) -> None:
    """Write the generated marker, package clause and imports."""
    out.write(f"{GENERATED_MARKER}\n\n")
    out.write(f"package {package}\n\n")
    for imp in imports:
        out.write(f"import {quote_go_string(imp)}\n\n")


def write_map_literal(out: io.StringIO, name: str, bundle: Mapping[str, str]) -> None:
    """Write the ``map[string]string`` variable, entries sorted by key."""
    if not bundle:
        out.write(f"var {name} = map[string]string{{}}\n")
        return
    out.write(f"var {name} = map[string]string{{\n")
    for key in sorted(bundle):
        out.write(f"\t{quote_go_string(key)}: {quote_go_string(bundle[key])},\n")
    out.write("}\n")


@register_renderer(OutputShape.PLAIN)
def render_plain(target: BundleTarget, bundle: Mapping[str, str]) -> str:
    """Render a standalone Go file declaring the bundle as a map literal."""
    out = io.StringIO()
    write_header(out, target.package)
    write_map_literal(out, target.name, bundle)
    return out.getvalue()


@register_renderer(OutputShape.VIPER)
def render_with_viper(target: BundleTarget, bundle: Mapping[str, str]) -> str:
    """Render the map literal plus an ``init`` registering each entry as a viper default.

    Keys become viper keys, so a prefix such as ``FILE`` makes the values
    reachable as ``viper.GetString("FILE/usage.txt")``.
    """
    out = io.StringIO()
    write_header(out, target.package, imports=[VIPER_IMPORT])
    write_map_literal(out, target.name, bundle)
    out.write("\nfunc init() {\n")
    out.write(f"\tfor key, value := range {target.name} {{\n")
    out.write("\t\tviper.SetDefault(key, value)\n")
    out.write("\t}\n")
    out.write("}\n")
    return out.getvalue()


def render_bundle(
    package: str,
    name: str,
    bundle: Mapping[str, str],
    *,
    shape: OutputShape | str = OutputShape.PLAIN,
) -> str:
    """Render a bundle as Go source.

    Output is byte-for-byte reproducible: entries are emitted in sorted key order.

    Args:
        package (str): Go package name
        name (str): Go variable name of the map
        bundle (Mapping[str, str]): the bundle to render
        shape (OutputShape | str): layout of the generated file

    Raises:
        InvalidTargetError: if the names or the shape are not valid.

    Returns:
        str: the generated Go source
    """
    target = make_target(package, name)
    try:
        renderer = BUNDLE_RENDERER[OutputShape(shape)]
    except (KeyError, ValueError) as exc:
        raise InvalidTargetError(field="shape", value=str(shape), reason="unknown output shape") from exc
    return renderer(target, bundle)


def write_bundle(
    sink: TextIO,
    package: str,
    name: str,
    bundle: Mapping[str, str],
    *,
    shape: OutputShape | str = OutputShape.PLAIN,
) -> None:
    """Render a bundle and write it to ``sink``.

    Nothing is written when the target is invalid. Errors raised by the sink
    propagate to the caller.
    """
    sink.write(render_bundle(package, name, bundle, shape=shape))
