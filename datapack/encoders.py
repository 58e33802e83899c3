"""Byte encoders for the three payload families stored in a data pack."""

from __future__ import annotations

import gzip
import io
import struct
from typing import Union

import nbtlib

from .errors import EncodingError

TreeValue = Union[nbtlib.Compound, str, bytes]

# zlib's default level.
_GZIP_LEVEL = 6


def encode_text(content: str) -> bytes:
    """Return ``content`` as UTF-8 bytes, untouched."""
    try:
        return content.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Text is not encodable as UTF-8: {exc}") from exc


def encode_json(content: str) -> bytes:
    """Return a caller-supplied JSON document as bytes.

    The text is not parsed; callers are responsible for handing in valid JSON.
    """
    return encode_text(content)


def encode_tree(value: TreeValue, compress: bool = True) -> bytes:
    """Encode a tree document as a big-endian NBT file with an unnamed root.

    ``value`` is an ``nbtlib.Compound``, an SNBT literal, or bytes of an
    already encoded file (plain or gzipped, such as a structure exported from
    the game); bytes are returned unchanged and ``compress`` is ignored. For
    the other forms the result is gzip-wrapped with a zero mtime when
    ``compress`` is set, so identical inputs always yield identical bytes.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    root = _coerce_root(value)
    buffer = io.BytesIO()
    try:
        nbtlib.File(root, root_name="").write(buffer)
    except (AttributeError, TypeError, ValueError, OverflowError, struct.error) as exc:
        raise EncodingError(f"Tree document could not be encoded: {exc}") from exc
    data = buffer.getvalue()
    if compress:
        return gzip.compress(data, compresslevel=_GZIP_LEVEL, mtime=0)
    return data


def _coerce_root(value: TreeValue) -> nbtlib.Compound:
    if isinstance(value, str):
        try:
            value = nbtlib.parse_nbt(value)
        except ValueError as exc:
            raise EncodingError(f"Invalid SNBT literal: {exc}") from exc
    if not isinstance(value, nbtlib.Compound):
        raise EncodingError(
            f"Tree document root must be a compound, got {type(value).__name__}"
        )
    return value


__all__ = ["TreeValue", "encode_json", "encode_text", "encode_tree"]
