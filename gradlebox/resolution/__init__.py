"""Variant resolution for build descriptors."""

from gradlebox.resolution.models import (
    DependencyGraph,
    ResolutionResult,
    ResolvedCompileOptions,
    ResolvedDependency,
    ResolvedSdk,
    VariantConfig,
    VariantResult,
)
from gradlebox.resolution.providers import (
    InMemorySigningConfigRegistry,
    MappingSdkDefaults,
    create_signing_config_registry,
)
from gradlebox.resolution.resolver import (
    VariantResolver,
    create_variant_resolver,
    resolve,
)


__all__: list[str] = [
    # Resolver
    "VariantResolver",
    "resolve",
    # Collaborators
    "InMemorySigningConfigRegistry",
    "MappingSdkDefaults",
    # Results
    "DependencyGraph",
    "ResolutionResult",
    "ResolvedCompileOptions",
    "ResolvedDependency",
    "ResolvedSdk",
    "VariantConfig",
    "VariantResult",
    # Factory functions
    "create_signing_config_registry",
    "create_variant_resolver",
]
