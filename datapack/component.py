"""Component model: the categorised documents that make up a data pack."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from .encoders import TreeValue, encode_json, encode_text, encode_tree
from .errors import ConfigurationError


class PayloadKind(Enum):
    """Payload family of a component; decides the file extension."""

    SCRIPT = "mcfunction"
    JSON = "json"
    TREE = "nbt"

    @property
    def extension(self) -> str:
        return self.value


class Category(Enum):
    """Closed set of content categories a component can belong to."""

    ADVANCEMENT = "advancement"
    FUNCTION = "function"
    ITEM_MODIFIER = "item_modifier"
    LOOT_TABLE = "loot_table"
    PREDICATE = "predicate"
    RECIPE = "recipe"
    STRUCTURE = "structure"

    TAG_BLOCK = "tag_block"
    TAG_ENTITY_TYPE = "tag_entity_type"
    TAG_FLUID = "tag_fluid"
    TAG_FUNCTION = "tag_function"
    TAG_GAME_EVENT = "tag_game_event"
    TAG_ITEM = "tag_item"

    DIMENSION = "dimension"
    DIMENSION_TYPE = "dimension_type"

    WORLDGEN_BIOME = "worldgen_biome"
    WORLDGEN_CONFIGURED_CARVER = "worldgen_configured_carver"
    WORLDGEN_CONFIGURED_FEATURE = "worldgen_configured_feature"
    WORLDGEN_CONFIGURED_STRUCTURE_FEATURE = "worldgen_configured_structure_feature"
    WORLDGEN_CONFIGURED_SURFACE_BUILDER = "worldgen_configured_surface_builder"
    WORLDGEN_NOISE_SETTINGS = "worldgen_noise_settings"
    WORLDGEN_PLACED_FEATURE = "worldgen_placed_feature"
    WORLDGEN_PROCESSOR_LIST = "worldgen_processor_list"
    WORLDGEN_TEMPLATE_POOL = "worldgen_template_pool"

    GENERIC_JSON = "generic_json"
    GENERIC_TREE = "generic_tree"
    GENERIC_SCRIPT = "generic_script"

    @property
    def subdirectory(self) -> str:
        return _SUBDIRECTORIES[self]

    @property
    def kind(self) -> PayloadKind:
        return _KINDS.get(self, PayloadKind.JSON)

    @property
    def is_generic(self) -> bool:
        return self in _GENERIC


_SUBDIRECTORIES: Dict[Category, str] = {
    Category.ADVANCEMENT: "advancements",
    Category.FUNCTION: "functions",
    Category.ITEM_MODIFIER: "item_modifiers",
    Category.LOOT_TABLE: "loot_tables",
    Category.PREDICATE: "predicates",
    Category.RECIPE: "recipes",
    Category.STRUCTURE: "structures",
    Category.TAG_BLOCK: "tags/blocks",
    Category.TAG_ENTITY_TYPE: "tags/entity_types",
    Category.TAG_FLUID: "tags/fluids",
    Category.TAG_FUNCTION: "tags/functions",
    Category.TAG_GAME_EVENT: "tags/game_events",
    Category.TAG_ITEM: "tags/items",
    Category.DIMENSION: "dimension",
    Category.DIMENSION_TYPE: "dimension_type",
    Category.WORLDGEN_BIOME: "worldgen/biome",
    Category.WORLDGEN_CONFIGURED_CARVER: "worldgen/configured_carver",
    Category.WORLDGEN_CONFIGURED_FEATURE: "worldgen/configured_feature",
    Category.WORLDGEN_CONFIGURED_STRUCTURE_FEATURE: "worldgen/configured_structure_feature",
    Category.WORLDGEN_CONFIGURED_SURFACE_BUILDER: "worldgen/configured_surface_builder",
    Category.WORLDGEN_NOISE_SETTINGS: "worldgen/noise_settings",
    Category.WORLDGEN_PLACED_FEATURE: "worldgen/placed_feature",
    Category.WORLDGEN_PROCESSOR_LIST: "worldgen/processor_list",
    Category.WORLDGEN_TEMPLATE_POOL: "worldgen/template_pool",
    Category.GENERIC_JSON: "",
    Category.GENERIC_TREE: "",
    Category.GENERIC_SCRIPT: "",
}

_KINDS: Dict[Category, PayloadKind] = {
    Category.FUNCTION: PayloadKind.SCRIPT,
    Category.GENERIC_SCRIPT: PayloadKind.SCRIPT,
    Category.STRUCTURE: PayloadKind.TREE,
    Category.GENERIC_TREE: PayloadKind.TREE,
}

_GENERIC = frozenset({Category.GENERIC_JSON, Category.GENERIC_TREE, Category.GENERIC_SCRIPT})


@dataclass(frozen=True)
class TextDocument:
    """Text payload used by script and JSON components."""

    content: str


@dataclass(frozen=True)
class TreeDocument:
    """Tree payload encoded to NBT at build time, or pre-encoded NBT bytes."""

    value: TreeValue
    compress: bool = True


Payload = Union[TextDocument, TreeDocument]


@dataclass(frozen=True)
class Component:
    """A single document destined for exactly one archive entry.

    The execution-phase flags only apply to ``Category.FUNCTION``; they do not
    change the component's own entry and are read by the builder when it
    generates the ``load``/``tick`` function tags.
    """

    category: Category
    path: str
    payload: Payload
    runs_on_load: bool = False
    runs_on_tick: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.category, Category):
            raise ConfigurationError(f"Unknown component category: {self.category!r}")
        if not self.path:
            raise ConfigurationError(f"{self.category.value} component needs a non-empty path")
        expected = TreeDocument if self.category.kind is PayloadKind.TREE else TextDocument
        if not isinstance(self.payload, expected):
            raise ConfigurationError(
                f"{self.category.value} component {self.path!r} expects a {expected.__name__} payload"
            )
        if (self.runs_on_load or self.runs_on_tick) and self.category is not Category.FUNCTION:
            raise ConfigurationError(
                f"Only function components can run on load or tick ({self.category.value} {self.path!r})"
            )

    @classmethod
    def function(
        cls, content: str, path: str, *, on_load: bool = False, on_tick: bool = False
    ) -> "Component":
        return cls(Category.FUNCTION, path, TextDocument(content), on_load, on_tick)

    @classmethod
    def json(cls, category: Category, content: str, path: str) -> "Component":
        return cls(category, path, TextDocument(content))

    @classmethod
    def structure(cls, value: TreeValue, path: str, *, compress: bool = True) -> "Component":
        return cls(Category.STRUCTURE, path, TreeDocument(value, compress))

    @classmethod
    def script(cls, content: str, path: str) -> "Component":
        return cls(Category.GENERIC_SCRIPT, path, TextDocument(content))

    @classmethod
    def tree(cls, value: TreeValue, path: str, *, compress: bool = True) -> "Component":
        return cls(Category.GENERIC_TREE, path, TreeDocument(value, compress))

    @property
    def kind(self) -> PayloadKind:
        return self.category.kind

    def encode(self) -> bytes:
        """Serialise the payload; tree encoding failures raise ``EncodingError``."""
        payload = self.payload
        if isinstance(payload, TreeDocument):
            return encode_tree(payload.value, payload.compress)
        if self.kind is PayloadKind.SCRIPT:
            return encode_text(payload.content)
        return encode_json(payload.content)


def category_path(target: Union[Component, Category]) -> str:
    """Return the archive subdirectory for a component or category.

    Generic categories map to the empty string.
    """
    category = target.category if isinstance(target, Component) else target
    return category.subdirectory


def archive_entry_path(component: Component, namespace: str) -> str:
    """Return the archive path ``component`` is written to inside ``namespace``."""
    extension = component.kind.extension
    subdirectory = category_path(component)
    if subdirectory:
        return f"data/{namespace}/{subdirectory}/{component.path}.{extension}"
    return f"data/{namespace}/{component.path}.{extension}"


__all__ = [
    "Category",
    "Component",
    "Payload",
    "PayloadKind",
    "TextDocument",
    "TreeDocument",
    "archive_entry_path",
    "category_path",
]
