"""Layered configuration merge.

Each specificity level (toolchain defaults, global android/defaultConfig
settings, build type settings) is captured as a ``ConfigLayer``. Layers are
merged from least to most specific, so a build type overrides a global value
and a global value overrides a default. Within a single layer a field may be
assigned only once.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from gradlebox.core.errors import DuplicateConfigurationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assignment:
    """A single field assignment and where it was declared."""

    field: str
    value: Any
    origin: str


@dataclass
class ConfigLayer:
    """Field values set at one specificity level."""

    name: str
    values: dict[str, Any] = field(default_factory=dict)
    origins: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_assignments(
        cls, name: str, assignments: Iterable[Assignment]
    ) -> "ConfigLayer":
        """Build a layer, skipping unset (``None``) values.

        Raises:
            DuplicateConfigurationError: If a field is assigned twice
        """
        layer = cls(name=name)
        for assignment in assignments:
            if assignment.value is None:
                continue
            if assignment.field in layer.values:
                raise DuplicateConfigurationError(
                    f"'{assignment.field}' is set twice in {name}: "
                    f"'{layer.origins[assignment.field]}' and '{assignment.origin}'",
                    field=assignment.field,
                    layer=name,
                )
            layer.values[assignment.field] = assignment.value
            layer.origins[assignment.field] = assignment.origin
        return layer


@dataclass
class MergedConfig:
    """Result of merging layers, with the layer each value came from."""

    values: dict[str, Any] = field(default_factory=dict)
    sources: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]


def merge_layers(
    layers: Sequence[ConfigLayer], accumulate: Iterable[str] = ()
) -> MergedConfig:
    """Merge layers ordered from least to most specific.

    Args:
        layers: Layers to merge, least specific first
        accumulate: List-valued fields that are concatenated across layers
            instead of replaced

    Returns:
        MergedConfig: Effective values
    """
    accumulated = set(accumulate)
    merged = MergedConfig()
    for layer in layers:
        for name, value in layer.values.items():
            if name in accumulated and name in merged.values:
                merged.values[name] = [*merged.values[name], *value]
                merged.sources[name] = f"{merged.sources[name]}+{layer.name}"
                continue
            if name in merged.values:
                logger.debug(
                    "%s overrides %s from %s", layer.name, name, merged.sources[name]
                )
            merged.values[name] = value
            merged.sources[name] = layer.name
    return merged
