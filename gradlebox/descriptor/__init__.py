"""Descriptor models and loaders."""

from gradlebox.descriptor.loader import load_descriptor, load_descriptor_text
from gradlebox.descriptor.models import (
    BuildType,
    CompileOptions,
    DefaultConfig,
    Dependency,
    DependencyScope,
    Descriptor,
    FlutterConfig,
    JavaVersion,
    KotlinOptions,
    SigningConfig,
    ValueReference,
)


__all__ = [
    "BuildType",
    "CompileOptions",
    "DefaultConfig",
    "Dependency",
    "DependencyScope",
    "Descriptor",
    "FlutterConfig",
    "JavaVersion",
    "KotlinOptions",
    "SigningConfig",
    "ValueReference",
    "load_descriptor",
    "load_descriptor_text",
]
