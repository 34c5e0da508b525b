"""Protocol definitions for resolver collaborators."""

from typing import Protocol, runtime_checkable

from gradlebox.descriptor.models import SigningConfig


@runtime_checkable
class SdkDefaultsProtocol(Protocol):
    """Provider of values the build toolchain would otherwise inject implicitly.

    Implementations must be deterministic for the duration of a resolution.
    """

    def lookup(self, key: str) -> int | str:
        """Return the value for ``key``.

        Raises:
            MissingSdkDefaultError: If the key is unknown
        """
        ...


@runtime_checkable
class SigningConfigRegistryProtocol(Protocol):
    """Registry of signing configurations known to the build."""

    def lookup(self, name: str) -> SigningConfig:
        """Return the signing config registered under ``name``.

        Raises:
            UnresolvedSigningConfigError: If no config has that name
        """
        ...

    def names(self) -> list[str]:
        """Return all registered signing config names."""
        ...
