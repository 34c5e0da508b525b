"""Build variant resolver.

Turns a ``Descriptor`` into one ``VariantConfig`` per declared build type,
following the way the Android Gradle Plugin derives variants: toolchain
defaults, then global ``android``/``defaultConfig`` settings, then the build
type's own settings, plus the dependencies whose scope reaches the variant.
"""

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from gradlebox.core.errors import (
    DescriptorError,
    DuplicateConfigurationError,
    InconsistentCompileOptionsError,
    InvalidSdkRangeError,
    InvalidValueError,
    MissingCapabilityError,
    ResolutionError,
)
from gradlebox.descriptor.models import (
    FLUTTER_PLUGIN,
    KOTLIN_ANDROID_PLUGIN,
    BuildType,
    DependencyScope,
    Descriptor,
    JavaVersion,
    ValueReference,
    is_reference,
)
from gradlebox.protocols import SdkDefaultsProtocol, SigningConfigRegistryProtocol
from gradlebox.resolution.layers import (
    Assignment,
    ConfigLayer,
    MergedConfig,
    merge_layers,
)
from gradlebox.resolution.models import (
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
from gradlebox.resolution.scopes import Classpath, ScopeInfo, classify_scope
from gradlebox.resolution.versions import coordinate_version, version_key


if TYPE_CHECKING:
    from gradlebox.config.user_config import UserConfig


DEBUG_BUILD_TYPE = "debug"
DEFAULT_JAVA_VERSION = JavaVersion.VERSION_1_8

# (field, key used for the defaults lookup when the field is omitted)
SDK_FIELDS = (
    ("compile_sdk", "compileSdk"),
    ("min_sdk", "minSdk"),
    ("target_sdk", "targetSdk"),
)


class VariantResolver:
    """Resolve build variants from a descriptor.

    Resolution is pure: the same descriptor and collaborators always produce
    the same result. A failing variant does not stop the others; each variant
    ends up with either a ``VariantConfig`` or the error that stopped it.
    """

    def __init__(
        self,
        sdk_defaults: SdkDefaultsProtocol | None = None,
        signing_configs: SigningConfigRegistryProtocol | None = None,
        max_workers: int = 1,
    ) -> None:
        """Initialize variant resolver.

        Args:
            sdk_defaults: Lookup for values the toolchain injects, such as
                ``flutter.minSdkVersion``
            signing_configs: Registry of signing configs managed outside the
                descriptor
            max_workers: Resolve variants on this many threads when above 1
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.sdk_defaults = sdk_defaults or MappingSdkDefaults()
        self.signing_configs = signing_configs or InMemorySigningConfigRegistry()
        self.max_workers = max(1, max_workers)

    def resolve(self, descriptor: Descriptor) -> ResolutionResult:
        """Resolve every build type declared in ``descriptor``.

        Args:
            descriptor: Validated descriptor

        Returns:
            ResolutionResult: One result per build type, in declaration order

        Raises:
            DescriptorError: If no build type is declared
        """
        if not descriptor.build_types:
            raise DescriptorError("Descriptor must declare at least one build type")

        names = list(descriptor.build_types)
        self.logger.debug("Resolving %d variants: %s", len(names), ", ".join(names))

        # Global settings are shared; an error there fails every variant
        global_layer: ConfigLayer | ResolutionError
        try:
            global_layer = ConfigLayer.from_assignments(
                "android", self._global_assignments(descriptor)
            )
        except DuplicateConfigurationError as e:
            global_layer = e

        def resolve_one(name: str) -> VariantResult:
            return self._resolve_variant(descriptor, name, global_layer)

        if self.max_workers > 1 and len(names) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = dict(
                    zip(names, executor.map(resolve_one, names), strict=True)
                )
        else:
            outcomes = {name: resolve_one(name) for name in names}

        result = ResolutionResult({name: outcomes[name] for name in names})
        self.logger.info(
            "Resolved %d of %d variants", len(result.variants), len(result)
        )
        return result

    def resolve_strict(self, descriptor: Descriptor) -> dict[str, VariantConfig]:
        """Resolve all variants or raise the first variant error.

        Returns:
            dict: Variant name to VariantConfig

        Raises:
            ResolutionError: If any variant fails
        """
        result = self.resolve(descriptor)
        result.raise_for_errors()
        return result.variants

    def _resolve_variant(
        self,
        descriptor: Descriptor,
        name: str,
        global_layer: ConfigLayer | ResolutionError,
    ) -> VariantResult:
        if isinstance(global_layer, ResolutionError):
            return self._failure(name, global_layer)
        try:
            config = self._build_variant(descriptor, name, global_layer)
        except ResolutionError as e:
            return self._failure(name, e)

        self.logger.debug("Variant %s resolved", name)
        return VariantResult(name=name, config=config)

    def _failure(self, name: str, error: ResolutionError) -> VariantResult:
        if error.variant != name:
            error = error.for_variant(name)
        self.logger.warning("Variant %s failed: %s", name, error)
        return VariantResult(name=name, error=error)

    def _build_variant(
        self, descriptor: Descriptor, name: str, global_layer: ConfigLayer
    ) -> VariantConfig:
        build_type = descriptor.build_types[name]
        merged = merge_layers(
            [
                self._defaults_layer(name),
                global_layer,
                ConfigLayer.from_assignments(
                    f"buildTypes.{name}", self._variant_assignments(build_type)
                ),
            ],
            accumulate=["proguard_files"],
        )

        sdk = self._resolve_sdk(merged)
        signing_config = self._resolve_signing_config(descriptor, merged)
        dependencies = self._select_dependencies(descriptor, name)
        self._check_desugaring(merged, dependencies)
        self._check_plugins(descriptor, merged)
        compile_options = self._resolve_compile_options(merged)

        resolved_dependencies = tuple(
            ResolvedDependency(
                coordinate=dependency_coordinate,
                scope=info.scope,
                classpaths=tuple(classpath.value for classpath in info.classpaths),
            )
            for dependency_coordinate, info in dependencies
        )

        application_id = merged.get("application_id") or descriptor.namespace
        if application_id and merged.get("application_id_suffix"):
            application_id += merged["application_id_suffix"]

        version_name = self._lookup_reference(merged.get("version_name"))
        if version_name is not None:
            version_name = str(version_name) + merged.get("version_name_suffix", "")

        version_code = self._lookup_level(merged.get("version_code"))
        if version_code is not None:
            version_code = self._as_int("versionCode", version_code)

        ndk_version = self._lookup_reference(merged.get("ndk_version"))

        return VariantConfig(
            name=name,
            namespace=descriptor.namespace,
            application_id=application_id,
            plugins=tuple(descriptor.plugins),
            sdk=sdk,
            ndk_version=None if ndk_version is None else str(ndk_version),
            version_code=version_code,
            version_name=version_name,
            compile_options=compile_options,
            signing_config=signing_config,
            minify_enabled=merged["minify_enabled"],
            shrink_resources=merged["shrink_resources"],
            debuggable=merged["debuggable"],
            proguard_files=tuple(merged.get("proguard_files", [])),
            dependencies=resolved_dependencies,
            compile_classpath=self._classpath(dependencies, Classpath.COMPILE),
            runtime_classpath=self._classpath(dependencies, Classpath.RUNTIME),
            desugaring_classpath=self._classpath(dependencies, Classpath.DESUGARING),
            test_classpath=self._classpath(dependencies, Classpath.TEST),
        )

    def _defaults_layer(self, name: str) -> ConfigLayer:
        """Values the toolchain assumes when nothing is declared."""
        is_debug = name == DEBUG_BUILD_TYPE
        return ConfigLayer.from_assignments(
            "defaults",
            [
                Assignment("source_compatibility", DEFAULT_JAVA_VERSION.value, "default"),
                Assignment("target_compatibility", DEFAULT_JAVA_VERSION.value, "default"),
                Assignment("core_library_desugaring_enabled", False, "default"),
                Assignment("minify_enabled", False, "default"),
                Assignment("shrink_resources", False, "default"),
                Assignment("debuggable", is_debug, "default"),
                Assignment(
                    "signing_config", DEBUG_BUILD_TYPE if is_debug else None, "default"
                ),
            ],
        )

    def _global_assignments(self, descriptor: Descriptor) -> list[Assignment]:
        default_config = descriptor.default_config
        compile_options = descriptor.compile_options
        kotlin_options = descriptor.kotlin_options

        assignments = [
            Assignment("application_id", descriptor.application_id, "applicationId"),
            Assignment("compile_sdk", descriptor.compile_sdk, "compileSdk"),
            Assignment("min_sdk", descriptor.min_sdk, "minSdk"),
            Assignment("target_sdk", descriptor.target_sdk, "targetSdk"),
            Assignment("ndk_version", descriptor.ndk_version, "ndkVersion"),
            Assignment("version_code", descriptor.version_code, "versionCode"),
            Assignment("version_name", descriptor.version_name, "versionName"),
            Assignment(
                "source_compatibility",
                descriptor.source_compatibility,
                "sourceCompatibility",
            ),
            Assignment(
                "target_compatibility",
                descriptor.target_compatibility,
                "targetCompatibility",
            ),
            Assignment(
                "core_library_desugaring_enabled",
                descriptor.core_library_desugaring_enabled,
                "coreLibraryDesugaringEnabled",
            ),
            Assignment("jvm_target", descriptor.jvm_target, "jvmTarget"),
        ]

        if default_config is not None:
            assignments += [
                Assignment(
                    "application_id",
                    default_config.application_id,
                    "defaultConfig.applicationId",
                ),
                Assignment("min_sdk", default_config.min_sdk, "defaultConfig.minSdk"),
                Assignment(
                    "target_sdk", default_config.target_sdk, "defaultConfig.targetSdk"
                ),
                Assignment(
                    "version_code",
                    default_config.version_code,
                    "defaultConfig.versionCode",
                ),
                Assignment(
                    "version_name",
                    default_config.version_name,
                    "defaultConfig.versionName",
                ),
                Assignment(
                    "signing_config",
                    default_config.signing_config,
                    "defaultConfig.signingConfig",
                ),
                Assignment(
                    "proguard_files",
                    default_config.proguard_files or None,
                    "defaultConfig.proguardFiles",
                ),
            ]

        if compile_options is not None:
            assignments += [
                Assignment(
                    "source_compatibility",
                    compile_options.source_compatibility,
                    "compileOptions.sourceCompatibility",
                ),
                Assignment(
                    "target_compatibility",
                    compile_options.target_compatibility,
                    "compileOptions.targetCompatibility",
                ),
                Assignment(
                    "core_library_desugaring_enabled",
                    compile_options.core_library_desugaring_enabled,
                    "compileOptions.coreLibraryDesugaringEnabled",
                ),
                Assignment(
                    "core_library_desugaring_enabled",
                    compile_options.is_core_library_desugaring_enabled,
                    "compileOptions.isCoreLibraryDesugaringEnabled",
                ),
            ]

        if kotlin_options is not None:
            assignments.append(
                Assignment(
                    "jvm_target", kotlin_options.jvm_target, "kotlinOptions.jvmTarget"
                )
            )

        return assignments

    def _variant_assignments(self, build_type: BuildType) -> list[Assignment]:
        return [
            Assignment("signing_config", build_type.signing_config, "signingConfig"),
            Assignment("minify_enabled", build_type.minify_enabled, "minifyEnabled"),
            Assignment(
                "minify_enabled", build_type.is_minify_enabled, "isMinifyEnabled"
            ),
            Assignment(
                "shrink_resources", build_type.shrink_resources, "shrinkResources"
            ),
            Assignment(
                "shrink_resources", build_type.is_shrink_resources, "isShrinkResources"
            ),
            Assignment("debuggable", build_type.debuggable, "debuggable"),
            Assignment("debuggable", build_type.is_debuggable, "isDebuggable"),
            Assignment(
                "proguard_files", build_type.proguard_files or None, "proguardFiles"
            ),
            Assignment(
                "application_id_suffix",
                build_type.application_id_suffix,
                "applicationIdSuffix",
            ),
            Assignment(
                "version_name_suffix",
                build_type.version_name_suffix,
                "versionNameSuffix",
            ),
        ]

    def _lookup_reference(self, value: Any) -> Any:
        """Resolve an explicit ``ValueReference``; literals pass through."""
        if isinstance(value, ValueReference):
            return self.sdk_defaults.lookup(value.ref)
        return value

    def _lookup_level(self, value: Any) -> Any:
        """Resolve an integer-valued field, where any dotted name is a reference."""
        if is_reference(value):
            return self.sdk_defaults.lookup(value)
        return self._lookup_reference(value)

    def _as_int(
        self, key: str, value: Any, error: type[ResolutionError] = InvalidValueError
    ) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdecimal():
            return int(value)
        raise error(f"{key} must resolve to an integer, got {value!r}", key=key)

    def _resolve_sdk(self, merged: MergedConfig) -> ResolvedSdk:
        levels: dict[str, int] = {}
        for field_name, key in SDK_FIELDS:
            value = merged.get(field_name)
            if value is None:
                value = self.sdk_defaults.lookup(key)
            else:
                value = self._lookup_level(value)
            levels[field_name] = self._as_int(key, value, InvalidSdkRangeError)

        sdk = ResolvedSdk(**levels)
        if not 0 < sdk.min_sdk <= sdk.target_sdk <= sdk.compile_sdk:
            raise InvalidSdkRangeError(
                "SDK levels must satisfy minSdk <= targetSdk <= compileSdk, got "
                f"minSdk={sdk.min_sdk}, targetSdk={sdk.target_sdk}, "
                f"compileSdk={sdk.compile_sdk}",
                **levels,
            )
        return sdk

    def _resolve_signing_config(
        self, descriptor: Descriptor, merged: MergedConfig
    ) -> str | None:
        name: str | None = merged.get("signing_config")
        if name is None or name in descriptor.signing_configs:
            return name
        return self.signing_configs.lookup(name).name or name

    def _select_dependencies(
        self, descriptor: Descriptor, variant: str
    ) -> list[tuple[str, ScopeInfo]]:
        """Validate all scopes and keep the dependencies reaching ``variant``."""
        variants = set(descriptor.build_types)
        declared: dict[tuple[str, str], str] = {}
        selected: list[tuple[str, ScopeInfo]] = []

        for dependency in descriptor.dependencies:
            info = classify_scope(dependency.scope, variants)

            key = (dependency.scope, dependency.module)
            if key in declared:
                raise DuplicateConfigurationError(
                    f"'{dependency.module}' is declared twice in scope "
                    f"'{dependency.scope}': '{declared[key]}' and "
                    f"'{dependency.coordinate}'",
                    scope=dependency.scope,
                    module=dependency.module,
                )
            declared[key] = dependency.coordinate

            if info.applies_to(variant):
                selected.append((dependency.coordinate, info))

        return selected

    def _check_desugaring(
        self, merged: MergedConfig, dependencies: list[tuple[str, ScopeInfo]]
    ) -> None:
        if merged["core_library_desugaring_enabled"]:
            return
        for coordinate, info in dependencies:
            if info.base is DependencyScope.CORE_LIBRARY_DESUGARING:
                raise MissingCapabilityError(
                    f"'{coordinate}' is declared as coreLibraryDesugaring but "
                    "coreLibraryDesugaringEnabled is false",
                    capability="coreLibraryDesugaring",
                )

    def _check_plugins(self, descriptor: Descriptor, merged: MergedConfig) -> None:
        if merged.get("jvm_target") is not None and not descriptor.has_plugin(
            KOTLIN_ANDROID_PLUGIN
        ):
            raise MissingCapabilityError(
                f"jvmTarget is set but the '{KOTLIN_ANDROID_PLUGIN}' plugin is not applied",
                capability=KOTLIN_ANDROID_PLUGIN,
            )
        if descriptor.flutter is not None and not descriptor.has_plugin(
            FLUTTER_PLUGIN
        ):
            raise MissingCapabilityError(
                f"A flutter block is declared but the '{FLUTTER_PLUGIN}' plugin is not applied",
                capability=FLUTTER_PLUGIN,
            )

    def _resolve_compile_options(self, merged: MergedConfig) -> ResolvedCompileOptions:
        source = JavaVersion.parse(merged["source_compatibility"])
        target = JavaVersion.parse(merged["target_compatibility"])
        jvm_target = merged.get("jvm_target")

        if JavaVersion.rank(source) > JavaVersion.rank(target):
            raise InconsistentCompileOptionsError(
                f"sourceCompatibility {source.value} is newer than "
                f"targetCompatibility {target.value}"
            )
        if jvm_target is not None and JavaVersion.parse(jvm_target) != target:
            raise InconsistentCompileOptionsError(
                f"jvmTarget {JavaVersion.parse(jvm_target).value} does not match "
                f"targetCompatibility {target.value}"
            )

        return ResolvedCompileOptions(
            source_compatibility=source,
            target_compatibility=target,
            jvm_target=jvm_target,
            core_library_desugaring_enabled=merged["core_library_desugaring_enabled"],
        )

    def _classpath(
        self, dependencies: list[tuple[str, ScopeInfo]], classpath: Classpath
    ) -> tuple[str, ...]:
        """Collect a classpath, keeping the newest version of each module."""
        by_module: dict[str, list[str]] = {}
        for coordinate, info in dependencies:
            if classpath in info.classpaths:
                module = ":".join(coordinate.split(":")[:2])
                by_module.setdefault(module, []).append(coordinate)

        entries = []
        for module, coordinates in by_module.items():
            winner = max(coordinates, key=lambda c: version_key(coordinate_version(c)))
            if len(coordinates) > 1:
                self.logger.debug(
                    "Conflict on %s resolved to %s for %s classpath",
                    module,
                    winner,
                    classpath.value,
                )
            entries.append(winner)
        return tuple(entries)


def resolve(
    descriptor: Descriptor,
    sdk_defaults: SdkDefaultsProtocol | Mapping[str, int | str] | None = None,
    signing_configs: SigningConfigRegistryProtocol | None = None,
) -> ResolutionResult:
    """Resolve ``descriptor`` with the given collaborators.

    ``sdk_defaults`` may be a plain mapping, which is wrapped in a
    ``MappingSdkDefaults``.
    """
    if isinstance(sdk_defaults, Mapping):
        sdk_defaults = MappingSdkDefaults(sdk_defaults)
    return VariantResolver(sdk_defaults, signing_configs).resolve(descriptor)


def create_variant_resolver(
    user_config: "UserConfig | None" = None,
    sdk_overrides: Mapping[str, int | str] | None = None,
    extra_signing_configs: list[str] | None = None,
    max_workers: int | None = None,
) -> VariantResolver:
    """Create a variant resolver configured from user configuration.

    Args:
        user_config: User configuration; toolchain defaults are used without it
        sdk_overrides: Values replacing configured SDK defaults
        extra_signing_configs: Signing config names added to the configured ones
        max_workers: Thread count, overriding the configured value

    Returns:
        VariantResolver: Configured resolver
    """
    if user_config is None:
        from gradlebox.config.user_config import create_user_config

        user_config = create_user_config()

    data = user_config.data
    sdk_defaults = MappingSdkDefaults(data.sdk_defaults).with_overrides(
        sdk_overrides or {}
    )
    signing_configs = create_signing_config_registry(
        [*data.signing_configs, *(extra_signing_configs or [])]
    )
    return VariantResolver(
        sdk_defaults=sdk_defaults,
        signing_configs=signing_configs,
        max_workers=max_workers if max_workers is not None else data.max_workers,
    )
