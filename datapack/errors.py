"""Error types raised while assembling data packs."""

from __future__ import annotations


class DataPackError(RuntimeError):
    """Base class for every failure raised by datapack."""


class EncodingError(DataPackError):
    """Raised when a payload cannot be serialised to bytes."""


class SinkWriteError(DataPackError):
    """Raised when the archive sink rejects an entry write."""


class ConfigurationError(DataPackError):
    """Raised for invalid pack settings, components or manifests."""


class BuildError(DataPackError):
    """Raised when a build aborts; names the entry that was being written."""

    def __init__(self, entry_path: str, cause: BaseException) -> None:
        super().__init__(f"Failed to build entry {entry_path}: {cause}")
        self.entry_path = entry_path
        self.cause = cause


__all__ = [
    "BuildError",
    "ConfigurationError",
    "DataPackError",
    "EncodingError",
    "SinkWriteError",
]
