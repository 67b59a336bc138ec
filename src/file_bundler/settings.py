from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

from file_bundler.config import DEFAULT_MAP_NAME, DEFAULT_MATCHER, DEFAULT_OUTPUT, ENV_PREFIX, OutputShape
from file_bundler.exceptions import MappingFileError

ENV_FILE = find_dotenv(usecwd=True)

# Options that can be bound from FILE_BUNDLER_<OPTION> variables.
ENV_OPTIONS = frozenset(
    {
        "directory",
        "output",
        "matcher",
        "prefix",
        "package",
        "plain_text",
        "bundle",
        "gzip",
        "viper",
        "suppress_errors",
        "http_paths",
        "mapping_file",
        "log_file",
        "verbose",
    },
)


class Settings(BaseModel):
    """Configuration settings for the file_bundler command."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    directory: Path = Field(default_factory=Path.cwd, description="Source directory.")
    output: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_OUTPUT, description="Output file.")
    matcher: str = Field(default=DEFAULT_MATCHER, description="File matcher.")
    prefix: str = Field(default="", description="Key prefix.")
    package: str = Field(..., description="Package name.")
    plain_text: bool = Field(default=False, description="Save as plain text instead of base64.")
    bundle: str = Field(default=DEFAULT_MAP_NAME, description="Name of generated map.")
    gzip: bool = Field(default=False, description="Use best gzip compression.")
    viper: bool = Field(default=False, description="Register entries as viper defaults.")
    suppress_errors: bool = Field(
        default=False,
        description="Write an empty bundle when bundling fails.",
    )
    http_paths: bool = Field(default=False, description="Use '/' as key separator.")
    map: list[tuple[str, str]] = Field(default_factory=list, description="Key overrides OLD=NEW.")
    mapping_file: Path | None = Field(default=None, description="YAML file of key overrides.")
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log every bundled file.")

    @property
    def shape(self) -> OutputShape:
        """Output shape selected by the ``viper`` flag."""
        return OutputShape.VIPER if self.viper else OutputShape.PLAIN

    @property
    def log_level(self) -> int:
        """Logging level selected by the ``verbose`` flag."""
        return logging.DEBUG if self.verbose else logging.INFO


def load_environment(env_file: str | Path | None = None) -> dict[str, str]:
    """Collect option defaults from ``FILE_BUNDLER_*`` variables.

    Values come from the ``.env`` file first, then from the process
    environment, which wins on conflicts.

    Args:
        env_file (str | Path | None): the dotenv file to read; defaults to the
            one found from the current directory.

    Returns:
        dict[str, str]: option name (e.g. ``plain_text``) to raw value
    """
    source = ENV_FILE if env_file is None else env_file
    values: dict[str, str | None] = dict(dotenv_values(source)) if source else {}
    values.update(os.environ)
    out: dict[str, str] = {}
    for key, value in values.items():
        if not key.startswith(ENV_PREFIX) or value is None:
            continue
        option = key.removeprefix(ENV_PREFIX).lower()
        if option in ENV_OPTIONS:
            out[option] = value
    return out


def load_mapping_file(path: Path) -> dict[str, str]:
    """Read explicit key overrides from a YAML mapping of old key to new key.

    Args:
        path (Path): the YAML file

    Raises:
        MappingFileError: if the document is not a flat mapping of strings.

    Returns:
        dict[str, str]: old key to new key
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise MappingFileError(path=path, reason=str(exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MappingFileError(path=path, reason="top-level document must be a mapping")
    mapping: dict[str, str] = {}
    for old, new in data.items():
        if not isinstance(old, str) or not isinstance(new, str):
            raise MappingFileError(path=path, reason=f"entry {old!r}: {new!r} must map a string key to a string key")
        mapping[old] = new
    return mapping


def build_mapping(settings: Settings) -> dict[str, str]:
    """Merge the mapping file and ``--map`` overrides; command-line entries win."""
    mapping = load_mapping_file(settings.mapping_file) if settings.mapping_file else {}
    mapping.update(dict(settings.map))
    return mapping
