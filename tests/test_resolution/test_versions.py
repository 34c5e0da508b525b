"""Tests for dependency version ordering."""

import pytest

from gradlebox.resolution.versions import (
    compare_versions,
    coordinate_version,
    version_key,
)


@pytest.mark.parametrize(
    "older,newer",
    [
        ("2.9.0", "2.10.0"),
        ("1.0", "1.0.1"),
        ("1.0-alpha01", "1.0"),
        ("1.0-alpha01", "1.0-beta01"),
        ("4.12.0", "5.0.0-alpha.12"),
        ("1.0.0-rc1", "1.0.0"),
    ],
)
def test_ordering(older, newer):
    assert compare_versions(older, newer) < 0
    assert compare_versions(newer, older) > 0


def test_equal_versions():
    assert compare_versions("2.1.3", "2.1.3") == 0


def test_version_key_sorts_newest_last():
    versions = ["2.10.0", "2.9.0", "2.10.0-rc01", "2.1"]

    assert sorted(versions, key=version_key) == ["2.1", "2.9.0", "2.10.0-rc01", "2.10.0"]


def test_coordinate_version():
    assert coordinate_version("androidx.work:work-runtime:2.9.0") == "2.9.0"
    assert coordinate_version("androidx.work:work-runtime") == ""
