"""Default implementations of the resolver's injected collaborators."""

import logging
from collections.abc import Iterable, Mapping

from gradlebox.core.errors import MissingSdkDefaultError, UnresolvedSigningConfigError
from gradlebox.descriptor.models import SigningConfig


logger = logging.getLogger(__name__)

# The Android toolchain always creates this signing config
DEBUG_SIGNING_CONFIG = "debug"


class MappingSdkDefaults:
    """SDK-defaults provider backed by a fixed mapping.

    Keys are either the names used in references (``flutter.minSdkVersion``)
    or the descriptor field names (``minSdk``) for fields that were omitted.
    """

    def __init__(self, values: Mapping[str, int | str] | None = None) -> None:
        self._values: dict[str, int | str] = dict(values or {})

    def lookup(self, key: str) -> int | str:
        try:
            return self._values[key]
        except KeyError:
            raise MissingSdkDefaultError(
                f"No default value is available for '{key}'", key=key
            ) from None

    def with_overrides(
        self, overrides: Mapping[str, int | str]
    ) -> "MappingSdkDefaults":
        """Return a new provider where ``overrides`` replace existing values."""
        return MappingSdkDefaults({**self._values, **overrides})

    def __contains__(self, key: object) -> bool:
        return key in self._values


class InMemorySigningConfigRegistry:
    """Signing config registry holding references only."""

    def __init__(self, configs: Iterable[SigningConfig] = ()) -> None:
        self._configs: dict[str, SigningConfig] = {
            DEBUG_SIGNING_CONFIG: SigningConfig(name=DEBUG_SIGNING_CONFIG)
        }
        for config in configs:
            self.register(config)

    def register(self, config: SigningConfig) -> None:
        if not config.name:
            raise ValueError("Signing config must have a name to be registered")
        self._configs[config.name] = config
        logger.debug("Registered signing config %s", config.name)

    def lookup(self, name: str) -> SigningConfig:
        try:
            return self._configs[name]
        except KeyError:
            known = ", ".join(sorted(self._configs))
            raise UnresolvedSigningConfigError(
                f"Signing config '{name}' is not defined (known: {known})",
                signing_config=name,
            ) from None

    def names(self) -> list[str]:
        return sorted(self._configs)


def create_signing_config_registry(
    names: Iterable[str] = (),
) -> InMemorySigningConfigRegistry:
    """Create a registry from a list of signing config names.

    Args:
        names: Names of signing configs managed outside the descriptor

    Returns:
        InMemorySigningConfigRegistry: Registry including the debug config
    """
    return InMemorySigningConfigRegistry(SigningConfig(name=name) for name in names)
