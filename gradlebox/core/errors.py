"""Error taxonomy for Gradlebox.

Every error raised by the package derives from ``GradleboxError``. Errors raised
while resolving a single build variant derive from ``ResolutionError`` and carry
the name of the variant they belong to, so they can be reported next to the
variants that resolved successfully.
"""

from typing import Any


class GradleboxError(Exception):
    """Base class for all Gradlebox errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ConfigError(GradleboxError):
    """User configuration could not be loaded or is invalid."""


class DescriptorError(GradleboxError):
    """Descriptor document could not be read, parsed or validated."""


class ResolutionError(GradleboxError):
    """Base class for errors that make a variant unresolvable."""

    def __init__(self, message: str, variant: str | None = None, **context: Any):
        super().__init__(message, **context)
        self.variant = variant

    def for_variant(self, variant: str) -> "ResolutionError":
        """Return a copy of this error attributed to ``variant``."""
        error = self.__class__(self.message, variant=variant, **self.context)
        error.__cause__ = self.__cause__
        return error


class MissingCapabilityError(ResolutionError):
    """A declaration needs a capability (flag or plugin) that is not enabled."""


class DuplicateConfigurationError(ResolutionError):
    """The same field was set twice at the same specificity level."""


class UnresolvedSigningConfigError(ResolutionError):
    """A build type references a signing config that is not registered."""


class InvalidSdkRangeError(ResolutionError):
    """SDK levels violate ``minSdk <= targetSdk <= compileSdk``."""


class UnknownDependencyScopeError(ResolutionError):
    """A dependency declares a scope outside the recognized set."""


class MissingSdkDefaultError(ResolutionError):
    """The SDK-defaults provider has no value for a requested key."""


class InconsistentCompileOptionsError(ResolutionError):
    """Java/Kotlin compatibility levels contradict each other."""


class InvalidValueError(ResolutionError):
    """A resolved value has the wrong type, such as a non-integer versionCode."""
