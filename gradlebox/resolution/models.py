"""Resolution output models."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from gradlebox.core.errors import ResolutionError
from gradlebox.descriptor.models import JavaVersion
from gradlebox.models.base import GradleboxFrozenModel


class ResolvedSdk(GradleboxFrozenModel):
    """SDK levels after references and defaults are applied."""

    compile_sdk: int
    min_sdk: int
    target_sdk: int


class ResolvedCompileOptions(GradleboxFrozenModel):
    """Effective Java/Kotlin compile options."""

    source_compatibility: JavaVersion
    target_compatibility: JavaVersion
    jvm_target: JavaVersion | None = None
    core_library_desugaring_enabled: bool = False


class ResolvedDependency(GradleboxFrozenModel):
    """A dependency that applies to a variant, with the classpaths it feeds."""

    coordinate: str
    scope: str
    classpaths: tuple[str, ...]


class VariantConfig(GradleboxFrozenModel):
    """Fully resolved configuration of one build type."""

    name: str
    namespace: str | None = None
    application_id: str | None = None
    plugins: tuple[str, ...] = ()
    sdk: ResolvedSdk
    ndk_version: str | None = None
    version_code: int | None = None
    version_name: str | None = None
    compile_options: ResolvedCompileOptions
    signing_config: str | None = None
    minify_enabled: bool = False
    shrink_resources: bool = False
    debuggable: bool = False
    proguard_files: tuple[str, ...] = ()
    dependencies: tuple[ResolvedDependency, ...] = ()
    compile_classpath: tuple[str, ...] = ()
    runtime_classpath: tuple[str, ...] = ()
    desugaring_classpath: tuple[str, ...] = ()
    test_classpath: tuple[str, ...] = ()

    def classpath(self, name: str) -> tuple[str, ...]:
        """Return a classpath by name (compile, runtime, desugaring, test)."""
        return tuple(getattr(self, f"{name}_classpath"))


@dataclass(frozen=True)
class VariantResult:
    """Outcome of resolving one variant: a config or an error."""

    name: str
    config: VariantConfig | None = None
    error: ResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DependencyUsage:
    """Where a coordinate ends up after resolution."""

    variant: str
    classpath: str


@dataclass
class DependencyGraph:
    """Flattened dependency graph across all resolved variants."""

    nodes: dict[str, list[DependencyUsage]] = field(default_factory=dict)

    def add(self, coordinate: str, usage: DependencyUsage) -> None:
        self.nodes.setdefault(coordinate, []).append(usage)

    def coordinates(self) -> list[str]:
        return sorted(self.nodes)

    def variants_for(self, coordinate: str) -> list[str]:
        """Variants whose classpaths contain ``coordinate``."""
        seen: dict[str, None] = {}
        for usage in self.nodes.get(coordinate, []):
            seen.setdefault(usage.variant, None)
        return list(seen)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {
            coordinate: [
                {"variant": usage.variant, "classpath": usage.classpath}
                for usage in self.nodes[coordinate]
            ]
            for coordinate in self.coordinates()
        }


class ResolutionResult(Mapping[str, VariantResult]):
    """Per-variant results of one resolution, in declaration order.

    Failed variants are reported next to successful ones; nothing is
    dropped.
    """

    def __init__(self, results: Mapping[str, VariantResult]) -> None:
        self._results = dict(results)

    def __getitem__(self, name: str) -> VariantResult:
        return self._results[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return f"ResolutionResult(variants={list(self.variants)}, errors={list(self.errors)})"

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self._results.values())

    @property
    def variants(self) -> dict[str, VariantConfig]:
        """Successfully resolved variants."""
        return {
            name: result.config
            for name, result in self._results.items()
            if result.config is not None
        }

    @property
    def errors(self) -> dict[str, ResolutionError]:
        """Errors of the variants that failed."""
        return {
            name: result.error
            for name, result in self._results.items()
            if result.error is not None
        }

    def raise_for_errors(self) -> None:
        """Raise the error of the first failed variant, if any."""
        for result in self._results.values():
            if result.error is not None:
                raise result.error

    def dependency_graph(self) -> DependencyGraph:
        """Build the flattened dependency graph of the resolved variants."""
        graph = DependencyGraph()
        for name, config in self.variants.items():
            for classpath in ("compile", "runtime", "desugaring", "test"):
                for coordinate in config.classpath(classpath):
                    graph.add(coordinate, DependencyUsage(name, classpath))
        return graph
