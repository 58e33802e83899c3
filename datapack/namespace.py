"""Namespace grouping for data pack components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .component import Component
from .errors import ConfigurationError


@dataclass
class Namespace:
    """A named, ordered collection of components sharing ``data/<name>/``.

    The name is used verbatim as an archive path segment.
    """

    name: str
    components: List[Component] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Namespace name must be a non-empty string")

    @classmethod
    def of(cls, name: str, *components: Component) -> "Namespace":
        return cls(name, list(components))

    def add_component(self, component: Component) -> "Namespace":
        self.components.append(component)
        return self


__all__ = ["Namespace"]
