"""Tests for datapack.encoders."""

from __future__ import annotations

import gzip

import pytest
from nbtlib import Byte, Compound, Int, String

from datapack.encoders import encode_json, encode_text, encode_tree
from datapack.errors import EncodingError

_SINGLE_BYTE_ROOT = b"\x0a\x00\x00" + b"\x01\x00\x01x\x01" + b"\x00"


def test_encode_text_is_plain_utf8() -> None:
    assert encode_text("say hi") == b"say hi"
    assert encode_text("tellraw @a \"héllo\"") == 'tellraw @a "héllo"'.encode("utf-8")


def test_encode_text_does_not_append_newline() -> None:
    assert encode_text("") == b""
    assert not encode_text("say hi").endswith(b"\n")


def test_encode_json_does_not_parse_content() -> None:
    assert encode_json("[JSON]") == b"[JSON]"
    assert encode_json('{"type": "minecraft:block"}') == b'{"type": "minecraft:block"}'


def test_encode_tree_writes_unnamed_root_compound() -> None:
    data = encode_tree(Compound({"x": Byte(1)}), compress=False)

    assert data == _SINGLE_BYTE_ROOT


def test_encode_tree_gzip_wraps_when_compressing() -> None:
    value = Compound({"x": Byte(1)})

    compressed = encode_tree(value)

    assert compressed[:2] == b"\x1f\x8b"
    assert gzip.decompress(compressed) == _SINGLE_BYTE_ROOT


def test_encode_tree_is_deterministic() -> None:
    value = Compound({"DataVersion": Int(3120), "author": String("builder")})

    assert encode_tree(value) == encode_tree(value)


def test_encode_tree_accepts_snbt_literal() -> None:
    assert encode_tree("{x: 1b}", compress=False) == _SINGLE_BYTE_ROOT


def test_encode_tree_rejects_non_tag_members() -> None:
    with pytest.raises(EncodingError):
        encode_tree(Compound({"x": object()}), compress=False)


def test_encode_tree_rejects_non_compound_root() -> None:
    with pytest.raises(EncodingError):
        encode_tree(Int(5))


def test_encode_tree_rejects_invalid_snbt() -> None:
    with pytest.raises(EncodingError):
        encode_tree("{x: ")


def test_encode_text_rejects_unencodable_text() -> None:
    with pytest.raises(EncodingError):
        encode_text("say \ud800")


def test_encode_tree_passes_encoded_bytes_through() -> None:
    exported = gzip.compress(_SINGLE_BYTE_ROOT)

    assert encode_tree(exported) == exported
    assert encode_tree(_SINGLE_BYTE_ROOT, compress=True) == _SINGLE_BYTE_ROOT
