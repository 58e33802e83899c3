"""Archive sinks: where built entries are written."""

from __future__ import annotations

import os
import tempfile
import zipfile
from contextlib import contextmanager, suppress
from enum import Enum
from pathlib import Path
from typing import BinaryIO, ContextManager, Iterator, Protocol

from .errors import ConfigurationError, SinkWriteError

# ZIP timestamps cannot represent dates before 1980; every entry gets this one.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_ENTRY_MODE = 0o644


class CompressionMode(Enum):
    """Compression applied uniformly to every entry of an archive."""

    STORED = "stored"
    DEFLATED = "deflated"
    BZIP2 = "bzip2"
    LZMA = "lzma"

    @property
    def zip_method(self) -> int:
        return _ZIP_METHODS[self]

    @classmethod
    def parse(cls, value: "CompressionMode | str") -> "CompressionMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ConfigurationError(
                f"Unknown compression mode {value!r} (expected one of: {choices})"
            ) from None


_ZIP_METHODS = {
    CompressionMode.STORED: zipfile.ZIP_STORED,
    CompressionMode.DEFLATED: zipfile.ZIP_DEFLATED,
    CompressionMode.BZIP2: zipfile.ZIP_BZIP2,
    CompressionMode.LZMA: zipfile.ZIP_LZMA,
}


class ArchiveSink(Protocol):
    """Path-keyed entry writer consumed by ``DataPackBuilder.build``."""

    def start_entry(self, path: str, compression: CompressionMode) -> ContextManager[BinaryIO]:
        ...

    def finish(self) -> None:
        ...


class ZipArchiveSink:
    """Writes entries into a zip archive over a caller-owned binary handle.

    ``finish`` writes the central directory; the handle itself stays open and
    remains the caller's to close.
    """

    def __init__(self, fileobj: BinaryIO) -> None:
        self._archive = zipfile.ZipFile(fileobj, "w")

    @contextmanager
    def start_entry(self, path: str, compression: CompressionMode) -> Iterator[BinaryIO]:
        info = zipfile.ZipInfo(path, date_time=_ZIP_EPOCH)
        info.compress_type = compression.zip_method
        info.external_attr = (_ENTRY_MODE & 0xFFFF) << 16
        try:
            with self._archive.open(info, "w") as stream:
                yield stream
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Could not write {path}: {exc}") from exc

    def finish(self) -> None:
        try:
            self._archive.close()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Could not finalise archive: {exc}") from exc

    def discard(self) -> None:
        """Release the zip writer after a failed build; the output is unusable."""
        with suppress(OSError, ValueError):
            self._archive.close()


@contextmanager
def atomic_output(path: Path) -> Iterator[BinaryIO]:
    """Yield a handle on a temporary file that replaces ``path`` on success.

    The temporary file lives in the destination directory so the final
    ``os.replace`` stays on one filesystem. On any exception it is removed and
    ``path`` is left untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            yield handle
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


__all__ = ["ArchiveSink", "CompressionMode", "ZipArchiveSink", "atomic_output"]
