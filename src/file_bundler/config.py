from __future__ import annotations

import re
from enum import StrEnum, auto
from functools import wraps
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    BundleRendererFn = Callable[["BundleTarget", Mapping[str, str]], str]


class OutputShape(StrEnum):
    """Layout of the generated Go file.

    PLAIN declares the map literal only. VIPER additionally registers every
    entry as a viper default from an ``init`` function.
    """

    PLAIN = auto()
    VIPER = auto()


DEFAULT_MATCHER = ".*"
DEFAULT_MAP_NAME = "bundle"
DEFAULT_OUTPUT = "bundle.go"

# gzip.compress level; 9 is best compression.
COMPRESSION_LEVEL = 9

GENERATED_MARKER = "// Code generated by file-bundler. DO NOT EDIT."
VIPER_IMPORT = "github.com/spf13/viper"

ENV_PREFIX = "FILE_BUNDLER_"

GO_KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    },
)

_GO_IDENTIFIER = re.compile(r"^[^\W\d]\w*$")

BUNDLE_RENDERER: dict[OutputShape, BundleRendererFn] = {}


def is_go_identifier(name: str) -> bool:
    """Check whether ``name`` can be used as a Go package or variable name.

    Args:
        name (str): the candidate identifier

    Returns:
        bool: True if ``name`` is a letter/underscore led word that is not a Go keyword.
    """
    return bool(_GO_IDENTIFIER.match(name)) and name not in GO_KEYWORDS


class BundleTarget(BaseModel):
    """Where the bundle lands in the generated source.

    Attributes:
        package: Go package clause of the generated file.
        name: Name of the generated ``map[string]string`` variable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package: str = Field(..., description="Go package name")
    name: str = Field(default=DEFAULT_MAP_NAME, description="Generated map variable name")

    @field_validator("package", "name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not is_go_identifier(value):
            msg = f"{value!r} is not a valid Go identifier"
            raise ValueError(msg)
        return value


def register_renderer(
    shape: OutputShape | list[OutputShape],
) -> Callable[[BundleRendererFn], BundleRendererFn]:
    """Decorator to register a function rendering a bundle in a given output shape.

    Args:
        shape (OutputShape | list[OutputShape]): the output shape(s) the decorated
            function renders.

    Returns:
        Callable[[BundleRendererFn], BundleRendererFn]: A decorator that registers the given
        function in the BUNDLE_RENDERER mapping under the specified shape(s).
    """

    def decorator(func: BundleRendererFn) -> BundleRendererFn:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
            return func(*args, **kwargs)

        if isinstance(shape, list):
            for s in shape:
                BUNDLE_RENDERER[s] = wrapper
        else:
            BUNDLE_RENDERER[shape] = wrapper
        return wrapper

    return decorator
