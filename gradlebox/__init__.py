"""Gradlebox - Android build variant resolution tool."""

from importlib.metadata import PackageNotFoundError, distribution

from .descriptor.loader import load_descriptor
from .descriptor.models import BuildType, Dependency, Descriptor
from .resolution.models import ResolutionResult, VariantConfig
from .resolution.resolver import VariantResolver, create_variant_resolver


try:
    __version__ = distribution(__package__ or "gradlebox").version
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BuildType",
    "Dependency",
    "Descriptor",
    "ResolutionResult",
    "VariantConfig",
    "VariantResolver",
    "create_variant_resolver",
    "load_descriptor",
    "__version__",
]
