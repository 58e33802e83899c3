"""Pipeline orchestration for the build and init flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .builder import DataPackBuilder
from .component import Component, PayloadKind, TextDocument, TreeDocument
from .config import MANIFEST_NAME, ComponentConfig, DataPackConfig, load_config
from .errors import ConfigurationError
from .logging import get_logger
from .namespace import Namespace
from .sink import CompressionMode

_STARTER_MANIFEST = """\
pack:
  format: 10
  description: "{namespace} data pack"
build:
  output: dist/{namespace}.zip
  compression: deflated
namespaces:
  - name: {namespace}
    components:
      - category: function
        path: hello
        source: src/{namespace}/hello.mcfunction
        on_load: true
"""


@dataclass
class BuildOutcome:
    """Result of a build run."""

    path: Path
    entries: List[str] = field(default_factory=list)
    load: List[str] = field(default_factory=list)
    tick: List[str] = field(default_factory=list)
    dry_run: bool = False


class Orchestrator:
    """Turns a manifest directory into a data pack archive."""

    def __init__(self) -> None:
        self.logger = get_logger("orchestrator")

    def run_build(
        self,
        path: str | Path,
        *,
        output: str | Path | None = None,
        dry_run: bool = False,
        compression: CompressionMode | str | None = None,
    ) -> BuildOutcome:
        """Build the data pack described by the manifest at ``path``."""
        config = load_config(Path(path))
        self.logger.info("Starting build for %s", config.root)

        builder = self.create_builder(config)
        if compression is not None:
            builder.set_compression(compression)
        target = self._resolve_output(config, output)

        if dry_run:
            entries = builder.plan()
            self.logger.info("Dry run: %d entries planned for %s", len(entries), target)
            return BuildOutcome(path=target, entries=entries, dry_run=True)

        result = builder.build_to_file(target)
        self.logger.info("Archive written to %s", target)
        return BuildOutcome(
            path=target, entries=result.entries, load=result.load, tick=result.tick
        )

    def run_init(self, path: str | Path, *, namespace: Optional[str] = None) -> Path:
        """Write a starter manifest and a ``hello`` load function under ``path``."""
        root = Path(path).expanduser().resolve()
        manifest = root / MANIFEST_NAME
        if manifest.exists():
            raise FileExistsError(f"{manifest} already exists")

        name = namespace or _namespace_from_dirname(root.name)
        source = root / "src" / name / "hello.mcfunction"
        source.parent.mkdir(parents=True, exist_ok=True)
        if not source.exists():
            source.write_text(f'tellraw @a "{name} loaded"\n', encoding="utf-8")
        manifest.write_text(_STARTER_MANIFEST.format(namespace=name), encoding="utf-8")
        self.logger.info("Created %s", manifest)
        return manifest

    def create_builder(self, config: DataPackConfig) -> DataPackBuilder:
        builder = (
            DataPackBuilder()
            .set_pack_format(config.pack.format)
            .set_description(config.pack.description)
            .set_compression(config.build.compression)
        )
        for namespace_config in config.namespaces:
            namespace = Namespace(namespace_config.name)
            for component_config in namespace_config.components:
                namespace.add_component(self._load_component(component_config))
            self.logger.debug(
                "Namespace %s: %d components", namespace.name, len(namespace.components)
            )
            builder.add_namespace(namespace)
        return builder

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_component(self, config: ComponentConfig) -> Component:
        is_tree = config.category.kind is PayloadKind.TREE
        if config.content is not None:
            data: str | bytes = config.content
        elif config.source is None:
            raise ConfigurationError(
                f"{config.category.value} {config.path!r} has neither source nor content"
            )
        else:
            label = f"{config.category.value} {config.path!r}"
            binary = is_tree and config.source.suffix != ".snbt"
            data = self._read_source(config.source, label, binary=binary)

        if is_tree:
            payload: TextDocument | TreeDocument = TreeDocument(data, compress=config.compress)
        else:
            payload = TextDocument(data)
        return Component(
            category=config.category,
            path=config.path,
            payload=payload,
            runs_on_load=config.on_load,
            runs_on_tick=config.on_tick,
        )

    def _read_source(self, source: Path, label: str, *, binary: bool) -> str | bytes:
        try:
            if binary:
                return source.read_bytes()
            return source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read source for {label}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigurationError(
                f"Source for {label} is not UTF-8 text: {exc}"
            ) from exc

    def _resolve_output(self, config: DataPackConfig, output: str | Path | None) -> Path:
        if output is not None:
            return Path(output).expanduser().resolve()
        if config.build.output is not None:
            return config.build.output
        return config.root / f"{config.root.name or 'datapack'}.zip"


def _namespace_from_dirname(dirname: str) -> str:
    cleaned = "".join(
        char if char.isalnum() or char in "_-." else "_" for char in dirname.lower()
    ).strip("_")
    return cleaned or "datapack"


__all__ = ["BuildOutcome", "Orchestrator"]
