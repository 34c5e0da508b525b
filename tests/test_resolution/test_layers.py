"""Tests for the layered configuration merge."""

import pytest

from gradlebox.core.errors import DuplicateConfigurationError
from gradlebox.resolution.layers import Assignment, ConfigLayer, merge_layers


class TestConfigLayer:
    def test_unset_values_are_skipped(self):
        layer = ConfigLayer.from_assignments(
            "android",
            [
                Assignment("min_sdk", 21, "minSdk"),
                Assignment("target_sdk", None, "targetSdk"),
            ],
        )

        assert layer.values == {"min_sdk": 21}
        assert layer.origins == {"min_sdk": "minSdk"}

    def test_second_assignment_in_layer_raises(self):
        with pytest.raises(DuplicateConfigurationError) as exc_info:
            ConfigLayer.from_assignments(
                "android",
                [
                    Assignment("min_sdk", 21, "minSdk"),
                    Assignment("min_sdk", 23, "defaultConfig.minSdk"),
                ],
            )

        error = exc_info.value
        assert error.context == {"field": "min_sdk", "layer": "android"}
        assert "defaultConfig.minSdk" in str(error)

    def test_unset_duplicate_is_not_a_conflict(self):
        layer = ConfigLayer.from_assignments(
            "buildTypes.release",
            [
                Assignment("minify_enabled", None, "minifyEnabled"),
                Assignment("minify_enabled", True, "isMinifyEnabled"),
            ],
        )

        assert layer.values == {"minify_enabled": True}


class TestMergeLayers:
    def setup_method(self):
        self.defaults = ConfigLayer(
            "defaults", {"minify_enabled": False, "proguard_files": ["a.pro"]}
        )
        self.android = ConfigLayer("android", {"min_sdk": 21})
        self.release = ConfigLayer(
            "buildTypes.release",
            {"minify_enabled": True, "proguard_files": ["b.pro"]},
        )

    def test_more_specific_layer_wins(self):
        merged = merge_layers([self.defaults, self.android, self.release])

        assert merged["minify_enabled"] is True
        assert merged["min_sdk"] == 21
        assert merged.sources["minify_enabled"] == "buildTypes.release"
        assert merged.sources["min_sdk"] == "android"

    def test_accumulated_fields_are_concatenated(self):
        merged = merge_layers(
            [self.defaults, self.release], accumulate=["proguard_files"]
        )

        assert merged["proguard_files"] == ["a.pro", "b.pro"]
        assert merged.sources["proguard_files"] == "defaults+buildTypes.release"

    def test_get_returns_default_for_missing_field(self):
        merged = merge_layers([self.android])

        assert merged.get("target_sdk") is None
        assert merged.get("target_sdk", 34) == 34
