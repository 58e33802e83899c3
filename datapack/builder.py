"""Archive assembly for data packs."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple

from .component import Category, archive_entry_path
from .encoders import encode_text
from .errors import BuildError, ConfigurationError, EncodingError, SinkWriteError
from .logging import get_logger
from .namespace import Namespace
from .sink import ArchiveSink, CompressionMode, ZipArchiveSink, atomic_output

PACK_METADATA_PATH = "pack.mcmeta"
LOAD_TAG_PATH = "data/minecraft/tags/functions/load.json"
TICK_TAG_PATH = "data/minecraft/tags/functions/tick.json"

DEFAULT_PACK_FORMAT = 10


@dataclass
class BuildResult:
    """Summary of a finished build."""

    entries: List[str] = field(default_factory=list)
    load: List[str] = field(default_factory=list)
    tick: List[str] = field(default_factory=list)


def function_tags(namespaces: Iterable[Namespace]) -> Tuple[List[str], List[str]]:
    """Return the ``load`` and ``tick`` function references, in scan order.

    Only ``Category.FUNCTION`` components take part; generic scripts never do.
    """
    load: List[str] = []
    tick: List[str] = []
    for namespace in namespaces:
        for component in namespace.components:
            if component.category is not Category.FUNCTION:
                continue
            reference = f"{namespace.name}:{component.path}"
            if component.runs_on_load:
                load.append(reference)
            if component.runs_on_tick:
                tick.append(reference)
    return load, tick


def render_function_tag(values: Sequence[str]) -> str:
    return json.dumps({"values": list(values)}, indent="\t", ensure_ascii=False)


def render_pack_metadata(pack_format: int, description: str) -> str:
    payload = {"pack": {"pack_format": pack_format, "description": description}}
    return json.dumps(payload, indent=4, ensure_ascii=False)


_Producer = Callable[[], bytes]


class DataPackBuilder:
    """Collects namespaces and pack settings, then writes a complete archive.

    Every setter returns the builder so calls can be chained. ``build`` keeps
    no state between runs, so one builder can produce several archives.

    Examples:
        >>> builder = DataPackBuilder().set_pack_format(10).set_description("demo")
        >>> builder = builder.add_namespace(
        ...     Namespace("demo").add_component(Component.function("say hi", "hello", on_load=True))
        ... )
    """

    def __init__(self) -> None:
        self.pack_format = DEFAULT_PACK_FORMAT
        self.description = ""
        self.compression = CompressionMode.DEFLATED
        self.namespaces: List[Namespace] = []
        self.logger = get_logger("builder")

    def set_pack_format(self, pack_format: int) -> "DataPackBuilder":
        if isinstance(pack_format, bool) or not isinstance(pack_format, int) or pack_format < 1:
            raise ConfigurationError(f"pack_format must be a positive integer, got {pack_format!r}")
        self.pack_format = pack_format
        return self

    def set_description(self, description: str) -> "DataPackBuilder":
        self.description = description
        return self

    def set_compression(self, compression: CompressionMode | str) -> "DataPackBuilder":
        self.compression = CompressionMode.parse(compression)
        return self

    def add_namespace(self, namespace: Namespace) -> "DataPackBuilder":
        # Copied so later edits to the caller's namespace do not leak in.
        self.namespaces.append(copy.deepcopy(namespace))
        return self

    def plan(self) -> List[str]:
        """Return every entry path ``build`` would write, in write order."""
        return [path for path, _ in self._entries()]

    def build(self, sink: ArchiveSink) -> BuildResult:
        """Write all entries into ``sink`` and finalise it.

        Raises:
            BuildError: when an entry cannot be encoded or written, or when two
                entries resolve to the same archive path. ``sink.finish`` is
                not called in that case.
        """
        entries = self._entries()
        result = BuildResult()
        for path, produce in entries:
            self._write_entry(sink, path, produce)
            result.entries.append(path)

        result.load, result.tick = function_tags(self.namespaces)
        try:
            sink.finish()
        except (SinkWriteError, OSError) as exc:
            raise BuildError("<archive>", exc) from exc

        self.logger.info(
            "Built data pack with %d entries (%d load, %d tick functions)",
            len(result.entries),
            len(result.load),
            len(result.tick),
        )
        return result

    def build_to_file(self, output: Path) -> BuildResult:
        """Build into ``output``, publishing the file only if the build succeeds."""
        output = Path(output)
        self.logger.debug("Writing archive to %s", output)
        with atomic_output(output) as handle:
            sink = ZipArchiveSink(handle)
            try:
                return self.build(sink)
            except BuildError:
                sink.discard()
                raise

    # ------------------------------------------------------------------
    # Internal helpers

    def _entries(self) -> List[Tuple[str, _Producer]]:
        entries: List[Tuple[str, _Producer]] = []
        metadata = render_pack_metadata(self.pack_format, self.description)
        entries.append((PACK_METADATA_PATH, lambda: encode_text(metadata)))

        for namespace in self.namespaces:
            for component in namespace.components:
                entries.append((archive_entry_path(component, namespace.name), component.encode))

        load, tick = function_tags(self.namespaces)
        load_text = render_function_tag(load)
        tick_text = render_function_tag(tick)
        entries.append((LOAD_TAG_PATH, lambda: encode_text(load_text)))
        entries.append((TICK_TAG_PATH, lambda: encode_text(tick_text)))

        seen = set()
        for path, _ in entries:
            if path in seen:
                raise BuildError(
                    path, ConfigurationError(f"Duplicate archive entry path: {path}")
                )
            seen.add(path)
        return entries

    def _write_entry(self, sink: ArchiveSink, path: str, produce: _Producer) -> None:
        try:
            data = produce()
            with sink.start_entry(path, self.compression) as stream:
                stream.write(data)
        except (EncodingError, SinkWriteError) as exc:
            raise BuildError(path, exc) from exc
        except OSError as exc:
            raise BuildError(path, SinkWriteError(str(exc))) from exc
        self.logger.debug("Wrote %s (%d bytes)", path, len(data))


__all__ = [
    "BuildResult",
    "DEFAULT_PACK_FORMAT",
    "DataPackBuilder",
    "LOAD_TAG_PATH",
    "PACK_METADATA_PATH",
    "TICK_TAG_PATH",
    "function_tags",
    "render_function_tag",
    "render_pack_metadata",
]
