"""Load descriptors from YAML, JSON or ``build.gradle.kts`` files."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gradlebox.core.errors import DescriptorError, DuplicateConfigurationError
from gradlebox.descriptor.kts_parser import kts_to_document, parse_kts
from gradlebox.descriptor.models import Descriptor


logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
KTS_SUFFIXES = {".kts"}


class _UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects keys repeated within one mapping."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Any:
        seen: set[Any] = set()
        for key_node, _value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise DuplicateConfigurationError(
                    f"'{key}' is set twice (line {key_node.start_mark.line + 1})",
                    field=key,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateConfigurationError(f"'{key}' is set twice", field=key)
        result[key] = value
    return result


def detect_format(path: Path) -> str:
    """Return ``yaml``, ``json`` or ``kts`` based on the file suffix."""
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        return "yaml"
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in KTS_SUFFIXES:
        return "kts"
    raise DescriptorError(
        f"Cannot tell descriptor format of '{path.name}' "
        "(expected .yaml, .yml, .json or .gradle.kts)"
    )


def parse_document(text: str, fmt: str) -> dict[str, Any]:
    """Parse descriptor text into a plain document.

    Raises:
        DescriptorError: If the text cannot be parsed
        DuplicateConfigurationError: If a key is repeated within one mapping
    """
    try:
        if fmt == "yaml":
            data = yaml.load(text, Loader=_UniqueKeyLoader)  # noqa: S506
        elif fmt == "json":
            data = json.loads(text, object_pairs_hook=_reject_duplicate_pairs)
        elif fmt == "kts":
            data = kts_to_document(parse_kts(text))
        else:
            raise DescriptorError(f"Unknown descriptor format '{fmt}'")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DescriptorError(f"Failed to parse {fmt} descriptor: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DescriptorError(
            f"Descriptor must be a mapping, got {type(data).__name__}"
        )
    return data


def descriptor_from_document(data: dict[str, Any]) -> Descriptor:
    """Validate a plain document into a ``Descriptor``.

    Raises:
        DescriptorError: If validation fails
    """
    try:
        return Descriptor.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in e.errors()
        )
        raise DescriptorError(f"Invalid descriptor: {problems}") from e


def load_descriptor_text(text: str, fmt: str = "yaml") -> Descriptor:
    """Load a descriptor from text in the given format."""
    return descriptor_from_document(parse_document(text, fmt))


def load_descriptor(path: Path | str) -> Descriptor:
    """Load a descriptor file, choosing the format from its suffix.

    Args:
        path: Path to a .yaml/.yml, .json or .gradle.kts file

    Returns:
        Descriptor: Validated descriptor

    Raises:
        DescriptorError: If the file is missing, unreadable or invalid
        DuplicateConfigurationError: If a key is repeated within one mapping
    """
    path = Path(path)
    fmt = detect_format(path)
    logger.debug("Loading %s descriptor from %s", fmt, path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DescriptorError(f"Descriptor file not found: {path}") from e
    except OSError as e:
        raise DescriptorError(f"Cannot read descriptor {path}: {e}") from e

    descriptor = load_descriptor_text(text, fmt)
    logger.debug(
        "Loaded descriptor with %d build types and %d dependencies",
        len(descriptor.build_types),
        len(descriptor.dependencies),
    )
    return descriptor
