"""Tests for the error taxonomy."""

from gradlebox.core.errors import (
    DescriptorError,
    GradleboxError,
    InvalidSdkRangeError,
    ResolutionError,
    UnknownDependencyScopeError,
)


def test_context_is_kept():
    error = DescriptorError("bad descriptor", path="app.yaml")

    assert str(error) == "bad descriptor"
    assert error.context == {"path": "app.yaml"}
    assert isinstance(error, GradleboxError)


def test_for_variant_copies_error():
    cause = ValueError("root cause")
    error = InvalidSdkRangeError("out of range", min_sdk=30)
    error.__cause__ = cause

    attributed = error.for_variant("release")

    assert type(attributed) is InvalidSdkRangeError
    assert attributed.variant == "release"
    assert attributed.context == {"min_sdk": 30}
    assert attributed.__cause__ is cause
    assert error.variant is None


def test_resolution_errors_share_a_base():
    assert issubclass(UnknownDependencyScopeError, ResolutionError)
    assert not issubclass(DescriptorError, ResolutionError)
