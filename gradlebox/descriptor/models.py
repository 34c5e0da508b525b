"""Descriptor models for Android build configuration.

A descriptor is the declarative input of the resolver: plugins, SDK levels,
compile options, signing configs, build types and dependency coordinates, as
found in an application module's ``build.gradle.kts``.
"""

import re
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from gradlebox.models.base import GradleboxBaseModel, GradleboxFrozenModel


# Dotted identifier chain such as ``flutter.compileSdkVersion``
_REFERENCE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)+$")
_COORDINATE_PATTERN = re.compile(r"^[^:\s]+:[^:\s]+(:[^:\s]+){0,2}$")

ANDROID_APPLICATION_PLUGIN = "com.android.application"
ANDROID_LIBRARY_PLUGIN = "com.android.library"
KOTLIN_ANDROID_PLUGIN = "org.jetbrains.kotlin.android"
FLUTTER_PLUGIN = "dev.flutter.flutter-gradle-plugin"

PLUGIN_ALIASES = {
    "kotlin-android": KOTLIN_ANDROID_PLUGIN,
    "kotlin(android)": KOTLIN_ANDROID_PLUGIN,
    "android": ANDROID_APPLICATION_PLUGIN,
    "android-library": ANDROID_LIBRARY_PLUGIN,
}


def is_reference(value: Any) -> bool:
    """Return True if ``value`` names an externally provided default."""
    return isinstance(value, str) and bool(_REFERENCE_PATTERN.match(value))


class ValueReference(GradleboxFrozenModel):
    """Explicit reference to a toolchain value: ``{"ref": "flutter.versionName"}``.

    String-valued fields (``versionName``, ``ndkVersion``) are literals unless
    given in this form, so ``"beta.rc"`` is never mistaken for a reference.
    """

    ref: str

    @field_validator("ref")
    @classmethod
    def validate_ref(cls, v: str) -> str:
        if not is_reference(v):
            raise ValueError(
                f"Reference must be a dotted name like 'flutter.versionName', got '{v}'"
            )
        return v


# SDK levels are never literal strings, so a dotted name there is a reference
SdkValue = int | str | ValueReference
StringValue = str | ValueReference


def canonical_plugin_id(plugin_id: str) -> str:
    """Map a plugin alias to its fully qualified plugin id."""
    return PLUGIN_ALIASES.get(plugin_id, plugin_id)


class JavaVersion(str, Enum):
    """Java language level used for source/target compatibility."""

    VERSION_1_8 = "1.8"
    VERSION_11 = "11"
    VERSION_17 = "17"
    VERSION_21 = "21"

    @classmethod
    def parse(cls, value: Any) -> "JavaVersion":
        """Parse the spellings used by Gradle scripts.

        Accepts ``JavaVersion.VERSION_11``, ``VERSION_11``, ``11``, ``1.8``,
        ``1_8``, ``8`` and integers.
        """
        if isinstance(value, JavaVersion):
            return value
        text = str(value).strip()
        text = text.removeprefix("JavaVersion.").removeprefix("VERSION_")
        text = text.replace("_", ".")
        if text == "8":
            text = "1.8"
        try:
            return cls(text)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported Java version '{value}' (expected one of: {valid})"
            ) from None

    @staticmethod
    def rank(value: "JavaVersion | str") -> int:
        """Return the major version number for ordering comparisons."""
        text = JavaVersion.parse(value).value
        return 8 if text == "1.8" else int(text)


class DependencyScope(str, Enum):
    """Scopes recognized on dependency declarations."""

    IMPLEMENTATION = "implementation"
    API = "api"
    COMPILE_ONLY = "compileOnly"
    RUNTIME_ONLY = "runtimeOnly"
    CORE_LIBRARY_DESUGARING = "coreLibraryDesugaring"
    TEST_IMPLEMENTATION = "testImplementation"
    ANDROID_TEST_IMPLEMENTATION = "androidTestImplementation"


def _parse_sdk_value(value: Any) -> Any:
    if value is None:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isdecimal():
            return int(text)
        if is_reference(text):
            return text
    if isinstance(value, dict | ValueReference):
        return value
    raise ValueError(
        f"SDK level must be an integer or a reference like 'flutter.minSdkVersion', got {value!r}"
    )


def _parse_java_version(value: Any) -> Any:
    if value is None:
        return None
    return JavaVersion.parse(value)


class Dependency(GradleboxBaseModel):
    """A dependency coordinate declared under a scope."""

    coordinate: str
    scope: str

    @field_validator("coordinate")
    @classmethod
    def validate_coordinate(cls, v: str) -> str:
        """Require Maven ``group:artifact[:version[:classifier]]`` notation."""
        if not _COORDINATE_PATTERN.match(v):
            raise ValueError(
                f"Dependency coordinate must look like 'group:artifact:version', got '{v}'"
            )
        return v

    @property
    def group(self) -> str:
        return self.coordinate.split(":")[0]

    @property
    def artifact(self) -> str:
        return self.coordinate.split(":")[1]

    @property
    def version(self) -> str | None:
        parts = self.coordinate.split(":")
        return parts[2] if len(parts) > 2 else None

    @property
    def module(self) -> str:
        """Module identity without the version: ``group:artifact``."""
        return f"{self.group}:{self.artifact}"


class SigningConfig(GradleboxBaseModel):
    """Named signing configuration reference.

    Only references are carried; key material (passwords) is never part of
    the model.
    """

    name: str | None = None
    store_file: str | None = None
    key_alias: str | None = None


class BuildType(GradleboxBaseModel):
    """Named variant policy such as ``release`` or ``debug``.

    Boolean flags may be given either with their DSL property name
    (``minifyEnabled``) or their Kotlin accessor name (``isMinifyEnabled``).
    Setting both is a duplicate configuration and is reported when the
    variant is resolved.
    """

    signing_config: str | None = None
    minify_enabled: bool | None = None
    is_minify_enabled: bool | None = None
    shrink_resources: bool | None = None
    is_shrink_resources: bool | None = None
    debuggable: bool | None = None
    is_debuggable: bool | None = None
    proguard_files: list[str] = Field(default_factory=list)
    application_id_suffix: str | None = None
    version_name_suffix: str | None = None


class DefaultConfig(GradleboxBaseModel):
    """The ``defaultConfig`` block shared by all variants."""

    application_id: str | None = None
    min_sdk: SdkValue | None = None
    target_sdk: SdkValue | None = None
    version_code: SdkValue | None = None
    version_name: StringValue | None = None
    signing_config: str | None = None
    proguard_files: list[str] = Field(default_factory=list)

    @field_validator("min_sdk", "target_sdk", "version_code", mode="before")
    @classmethod
    def normalize_sdk_value(cls, v: Any) -> Any:
        return _parse_sdk_value(v)


class CompileOptions(GradleboxBaseModel):
    """The ``compileOptions`` block."""

    source_compatibility: JavaVersion | None = None
    target_compatibility: JavaVersion | None = None
    core_library_desugaring_enabled: bool | None = None
    is_core_library_desugaring_enabled: bool | None = None

    @field_validator("source_compatibility", "target_compatibility", mode="before")
    @classmethod
    def normalize_java_version(cls, v: Any) -> Any:
        return _parse_java_version(v)


class KotlinOptions(GradleboxBaseModel):
    """The ``kotlinOptions`` block."""

    jvm_target: JavaVersion | None = None

    @field_validator("jvm_target", mode="before")
    @classmethod
    def normalize_java_version(cls, v: Any) -> Any:
        return _parse_java_version(v)


class FlutterConfig(GradleboxBaseModel):
    """The ``flutter`` block consumed by the Flutter Gradle plugin."""

    source: str | None = None
    target: str | None = None


class Descriptor(GradleboxBaseModel):
    """Complete build configuration of one application module.

    Fields listed at the top level may alternatively be declared inside their
    nested block (``defaultConfig``, ``compileOptions``, ``kotlinOptions``).
    """

    plugins: list[str] = Field(default_factory=list)
    namespace: str | None = None
    application_id: str | None = None

    compile_sdk: SdkValue | None = None
    min_sdk: SdkValue | None = None
    target_sdk: SdkValue | None = None
    ndk_version: StringValue | None = None
    version_code: SdkValue | None = None
    version_name: StringValue | None = None

    source_compatibility: JavaVersion | None = None
    target_compatibility: JavaVersion | None = None
    core_library_desugaring_enabled: bool | None = None
    jvm_target: JavaVersion | None = None

    default_config: DefaultConfig | None = None
    compile_options: CompileOptions | None = None
    kotlin_options: KotlinOptions | None = None

    signing_configs: dict[str, SigningConfig] = Field(default_factory=dict)
    build_types: dict[str, BuildType]
    dependencies: list[Dependency] = Field(default_factory=list)
    flutter: FlutterConfig | None = None

    @field_validator(
        "compile_sdk", "min_sdk", "target_sdk", "version_code", mode="before"
    )
    @classmethod
    def normalize_sdk_value(cls, v: Any) -> Any:
        """Accept integers, numeric strings and references."""
        return _parse_sdk_value(v)

    @field_validator(
        "source_compatibility", "target_compatibility", "jvm_target", mode="before"
    )
    @classmethod
    def normalize_java_version(cls, v: Any) -> Any:
        """Accept the Gradle spellings of Java versions."""
        return _parse_java_version(v)

    @field_validator("plugins")
    @classmethod
    def normalize_plugins(cls, v: list[str]) -> list[str]:
        """Replace plugin aliases with fully qualified plugin ids."""
        return [canonical_plugin_id(plugin_id) for plugin_id in v]

    @field_validator("build_types")
    @classmethod
    def validate_build_types_not_empty(
        cls, v: dict[str, BuildType]
    ) -> dict[str, BuildType]:
        """Ensure at least one build type is declared."""
        if not v:
            raise ValueError("At least one build type must be declared")
        return v

    @model_validator(mode="after")
    def name_signing_configs(self) -> "Descriptor":
        """Fill in signing config names from their mapping keys."""
        for name, signing_config in self.signing_configs.items():
            if signing_config.name is None:
                signing_config.name = name
            elif signing_config.name != name:
                raise ValueError(
                    f"Signing config declared as '{name}' is named '{signing_config.name}'"
                )
        return self

    def has_plugin(self, plugin_id: str) -> bool:
        """Check whether a plugin (or one of its aliases) is applied."""
        return canonical_plugin_id(plugin_id) in self.plugins
