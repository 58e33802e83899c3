"""Configuration loading for datapack manifests (.datapack.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .builder import DEFAULT_PACK_FORMAT
from .component import Category
from .errors import ConfigurationError
from .sink import CompressionMode

MANIFEST_NAME = ".datapack.yml"


@dataclass
class PackConfig:
    """Values written to pack.mcmeta."""

    format: int = DEFAULT_PACK_FORMAT
    description: str = ""


@dataclass
class BuildConfig:
    """Where and how the archive is written."""

    output: Optional[Path] = None
    compression: CompressionMode = CompressionMode.DEFLATED


@dataclass
class ComponentConfig:
    """One component entry from a namespace's component list."""

    category: Category
    path: str
    source: Optional[Path] = None
    content: Optional[str] = None
    on_load: bool = False
    on_tick: bool = False
    compress: bool = True


@dataclass
class NamespaceConfig:
    """A namespace and its components, in manifest order."""

    name: str
    components: List[ComponentConfig] = field(default_factory=list)


@dataclass
class DataPackConfig:
    """Represents the settings defined in .datapack.yml."""

    root: Path
    pack: PackConfig = field(default_factory=PackConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    namespaces: List[NamespaceConfig] = field(default_factory=list)


def load_config(config_path: Path) -> DataPackConfig:
    """Load a manifest from disk; a missing manifest yields defaults."""
    config_file = resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DataPackConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{MANIFEST_NAME} must contain a mapping at the root")

    pack_data = _as_dict(data.get("pack"))
    pack = PackConfig()
    if pack_data:
        if "format" in pack_data:
            pack_format = _as_int(pack_data.get("format"))
            if pack_format is None or pack_format < 1:
                raise ConfigurationError(
                    f"pack.format must be a positive integer, got {pack_data.get('format')!r}"
                )
            pack.format = pack_format
        pack.description = _as_str(pack_data.get("description")) or ""

    build_data = _as_dict(data.get("build"))
    build = BuildConfig()
    if build_data:
        output = _as_str(build_data.get("output"))
        build.output = root / output if output else None
        compression = _as_str(build_data.get("compression"))
        if compression:
            build.compression = CompressionMode.parse(compression)

    namespaces = [
        _parse_namespace(raw, index, root)
        for index, raw in enumerate(_as_list(data.get("namespaces")))
    ]

    return DataPackConfig(root=root, pack=pack, build=build, namespaces=namespaces)


def resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / MANIFEST_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_namespace(raw: Any, index: int, root: Path) -> NamespaceConfig:
    data = _as_dict(raw)
    name = _as_str(data.get("name"))
    if not name:
        raise ConfigurationError(f"namespaces[{index}] needs a non-empty name")
    components = [
        _parse_component(item, f"{name}.components[{position}]", root)
        for position, item in enumerate(_as_list(data.get("components")))
    ]
    return NamespaceConfig(name=name, components=components)


def _parse_component(raw: Any, label: str, root: Path) -> ComponentConfig:
    data = _as_dict(raw)
    if not data:
        raise ConfigurationError(f"{label} must be a mapping")

    category_name = _as_str(data.get("category"))
    try:
        category = Category(category_name)
    except ValueError:
        raise ConfigurationError(f"{label} has unknown category {category_name!r}") from None

    path = _as_str(data.get("path"))
    if not path:
        raise ConfigurationError(f"{label} needs a path")

    source = _as_str(data.get("source"))
    content = _as_str(data.get("content"))
    if (source is None) == (content is None):
        raise ConfigurationError(f"{label} needs exactly one of 'source' or 'content'")

    compress = _as_bool(data.get("compress"))
    return ComponentConfig(
        category=category,
        path=path,
        source=root / source if source else None,
        content=content,
        on_load=_as_bool(data.get("on_load")) or False,
        on_tick=_as_bool(data.get("on_tick")) or False,
        compress=True if compress is None else compress,
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, Sequence) and not isinstance(value, str):
        return list(value)
    return []


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "BuildConfig",
    "ComponentConfig",
    "DataPackConfig",
    "MANIFEST_NAME",
    "NamespaceConfig",
    "PackConfig",
    "load_config",
    "resolve_config_path",
]
