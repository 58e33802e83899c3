"""Assemble data pack archives from namespaced, categorised components."""

from .builder import BuildResult, DataPackBuilder, function_tags
from .component import (
    Category,
    Component,
    PayloadKind,
    TextDocument,
    TreeDocument,
    archive_entry_path,
    category_path,
)
from .encoders import encode_json, encode_text, encode_tree
from .errors import BuildError, ConfigurationError, DataPackError, EncodingError, SinkWriteError
from .namespace import Namespace
from .sink import ArchiveSink, CompressionMode, ZipArchiveSink

__all__ = [
    "ArchiveSink",
    "BuildError",
    "BuildResult",
    "Category",
    "Component",
    "CompressionMode",
    "ConfigurationError",
    "DataPackBuilder",
    "DataPackError",
    "EncodingError",
    "Namespace",
    "PayloadKind",
    "SinkWriteError",
    "TextDocument",
    "TreeDocument",
    "ZipArchiveSink",
    "archive_entry_path",
    "category_path",
    "encode_json",
    "encode_text",
    "encode_tree",
    "function_tags",
]
