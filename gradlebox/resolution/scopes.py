"""Dependency scope classification.

A scope decides which classpaths a dependency contributes to and which
variants it applies to. Besides the fixed scopes, a build type named ``debug``
gets its own ``debugImplementation``, ``debugApi``, ``debugCompileOnly`` and
``debugRuntimeOnly`` scopes that only reach that variant.
"""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from gradlebox.core.errors import UnknownDependencyScopeError
from gradlebox.descriptor.models import DependencyScope


class Classpath(str, Enum):
    """Classpaths of a resolved variant."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    DESUGARING = "desugaring"
    TEST = "test"


SCOPE_CLASSPATHS: dict[DependencyScope, tuple[Classpath, ...]] = {
    DependencyScope.IMPLEMENTATION: (Classpath.COMPILE, Classpath.RUNTIME),
    DependencyScope.API: (Classpath.COMPILE, Classpath.RUNTIME),
    DependencyScope.COMPILE_ONLY: (Classpath.COMPILE,),
    DependencyScope.RUNTIME_ONLY: (Classpath.RUNTIME,),
    DependencyScope.CORE_LIBRARY_DESUGARING: (Classpath.DESUGARING,),
    DependencyScope.TEST_IMPLEMENTATION: (Classpath.TEST,),
    DependencyScope.ANDROID_TEST_IMPLEMENTATION: (Classpath.TEST,),
}

_FIXED_SCOPES = frozenset(member.value for member in DependencyScope)

VARIANT_SCOPE_SUFFIXES: dict[str, DependencyScope] = {
    "Implementation": DependencyScope.IMPLEMENTATION,
    "Api": DependencyScope.API,
    "CompileOnly": DependencyScope.COMPILE_ONLY,
    "RuntimeOnly": DependencyScope.RUNTIME_ONLY,
}


@dataclass(frozen=True)
class ScopeInfo:
    """Classification of a declared scope."""

    scope: str
    base: DependencyScope
    variant: str | None = None

    @property
    def classpaths(self) -> tuple[Classpath, ...]:
        return SCOPE_CLASSPATHS[self.base]

    def applies_to(self, variant: str) -> bool:
        """Check whether dependencies in this scope reach ``variant``."""
        return self.variant is None or self.variant == variant


def classify_scope(scope: str, variants: Collection[str]) -> ScopeInfo:
    """Classify ``scope`` against the declared build types.

    Args:
        scope: Scope tag from a dependency declaration
        variants: Names of the declared build types

    Returns:
        ScopeInfo: Base scope and, for variant scopes, the owning variant

    Raises:
        UnknownDependencyScopeError: If the scope is not recognized
    """
    if scope in _FIXED_SCOPES:
        return ScopeInfo(scope=scope, base=DependencyScope(scope))

    for suffix, base in VARIANT_SCOPE_SUFFIXES.items():
        prefix = scope.removesuffix(suffix)
        if prefix != scope and prefix in variants:
            return ScopeInfo(scope=scope, base=base, variant=prefix)

    known = ", ".join(sorted(_FIXED_SCOPES))
    raise UnknownDependencyScopeError(
        f"Unknown dependency scope '{scope}' (expected one of: {known}, "
        "or <buildType>Implementation/Api/CompileOnly/RuntimeOnly)",
        scope=scope,
    )
