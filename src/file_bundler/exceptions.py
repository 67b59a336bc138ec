from dataclasses import dataclass, fields
from pathlib import Path


@dataclass(frozen=True)
class FileBundlerError(Exception):
    """Base exception for errors in the file_bundler module."""

    def __str__(self) -> str:
        message = getattr(self, "message", "") or (self.__doc__ or "").strip()
        details = ", ".join(f"{f.name}={getattr(self, f.name)!r}" for f in fields(self) if f.name != "message")
        return f"{message} ({details})" if details else message


@dataclass(frozen=True)
class InvalidMatcherError(FileBundlerError):
    """Raised when the inclusion pattern is not a valid regular expression."""

    pattern: str
    reason: str
    message: str = "The inclusion pattern is not a valid regular expression."


@dataclass(frozen=True)
class InvalidTargetError(FileBundlerError):
    """Raised when the generated package, map name or output shape is malformed."""

    field: str
    value: str
    reason: str
    message: str = "The bundle target cannot be rendered."


@dataclass(frozen=True)
class MappingFileError(FileBundlerError):
    """Raised when a key mapping file does not hold a flat old-key to new-key mapping."""

    path: Path
    reason: str
    message: str = "The key mapping file is malformed."


@dataclass(frozen=True)
class BundleKeyCollisionError(FileBundlerError):
    """Raised when renaming a key would overwrite another bundled entry."""

    key: str
    source: str
    message: str = "A remapped key collides with an existing bundle key."
