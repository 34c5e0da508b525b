"""Tests for dependency scope classification."""

import pytest

from gradlebox.core.errors import UnknownDependencyScopeError
from gradlebox.descriptor.models import DependencyScope
from gradlebox.resolution.scopes import Classpath, classify_scope


VARIANTS = ["debug", "release"]


@pytest.mark.parametrize(
    "scope,classpaths",
    [
        ("implementation", (Classpath.COMPILE, Classpath.RUNTIME)),
        ("api", (Classpath.COMPILE, Classpath.RUNTIME)),
        ("compileOnly", (Classpath.COMPILE,)),
        ("runtimeOnly", (Classpath.RUNTIME,)),
        ("coreLibraryDesugaring", (Classpath.DESUGARING,)),
        ("testImplementation", (Classpath.TEST,)),
        ("androidTestImplementation", (Classpath.TEST,)),
    ],
)
def test_fixed_scopes(scope, classpaths):
    info = classify_scope(scope, VARIANTS)

    assert info.classpaths == classpaths
    assert info.variant is None
    assert info.applies_to("debug")
    assert info.applies_to("release")


def test_variant_scope_applies_to_its_variant_only():
    info = classify_scope("releaseCompileOnly", VARIANTS)

    assert info.base is DependencyScope.COMPILE_ONLY
    assert info.variant == "release"
    assert info.applies_to("release")
    assert not info.applies_to("debug")


def test_variant_scope_for_custom_build_type():
    info = classify_scope("profileRuntimeOnly", ["profile"])

    assert info.base is DependencyScope.RUNTIME_ONLY
    assert info.variant == "profile"


@pytest.mark.parametrize(
    "scope", ["bogusScope", "compile", "stagingImplementation", "Implementation"]
)
def test_unknown_scopes(scope):
    with pytest.raises(UnknownDependencyScopeError) as exc_info:
        classify_scope(scope, VARIANTS)

    assert exc_info.value.context["scope"] == scope
