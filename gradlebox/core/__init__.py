from .errors import (
    ConfigError,
    DescriptorError,
    DuplicateConfigurationError,
    GradleboxError,
    InconsistentCompileOptionsError,
    InvalidSdkRangeError,
    InvalidValueError,
    MissingCapabilityError,
    MissingSdkDefaultError,
    ResolutionError,
    UnknownDependencyScopeError,
    UnresolvedSigningConfigError,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
    "GradleboxError",
    "ConfigError",
    "DescriptorError",
    "ResolutionError",
    "MissingCapabilityError",
    "DuplicateConfigurationError",
    "UnresolvedSigningConfigError",
    "InvalidSdkRangeError",
    "InvalidValueError",
    "UnknownDependencyScopeError",
    "MissingSdkDefaultError",
    "InconsistentCompileOptionsError",
]
