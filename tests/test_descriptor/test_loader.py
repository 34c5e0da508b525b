"""Tests for loading descriptor files."""

import json
from pathlib import Path

import pytest

from gradlebox.core.errors import DescriptorError, DuplicateConfigurationError
from gradlebox.descriptor.loader import (
    detect_format,
    load_descriptor,
    load_descriptor_text,
    parse_document,
)


class TestDetectFormat:
    @pytest.mark.parametrize(
        "name,fmt",
        [
            ("app.yaml", "yaml"),
            ("app.YML", "yaml"),
            ("app.json", "json"),
            ("build.gradle.kts", "kts"),
        ],
    )
    def test_known_suffixes(self, name, fmt):
        assert detect_format(Path(name)) == fmt

    def test_unknown_suffix(self):
        with pytest.raises(DescriptorError, match="build.gradle"):
            detect_format(Path("build.gradle"))


class TestLoadDescriptor:
    def test_load_yaml(self, descriptor_file):
        descriptor = load_descriptor(descriptor_file())

        assert list(descriptor.build_types) == ["release"]
        assert [d.scope for d in descriptor.dependencies] == [
            "coreLibraryDesugaring",
            "implementation",
        ]

    def test_load_json(self, tmp_path, release_document):
        path = tmp_path / "app.json"
        path.write_text(json.dumps(release_document()))

        descriptor = load_descriptor(str(path))

        assert descriptor.namespace == "com.example.app"

    def test_load_kts(self, tmp_path, flutter_app_kts):
        path = tmp_path / "build.gradle.kts"
        path.write_text(flutter_app_kts)

        descriptor = load_descriptor(path)

        assert descriptor.namespace == "com.ziehro.satwatcher"
        assert descriptor.compile_sdk == "flutter.compileSdkVersion"
        assert descriptor.build_types["release"].is_minify_enabled is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(DescriptorError, match="not found"):
            load_descriptor(tmp_path / "missing.yaml")

    def test_validation_errors_name_the_field(self, descriptor_file):
        path = descriptor_file(minSdk="latest")

        with pytest.raises(DescriptorError, match="minSdk"):
            load_descriptor(path)


class TestParseDocument:
    def test_duplicate_yaml_key(self):
        text = "minSdk: 21\nminSdk: 23\nbuildTypes:\n  release: {}\n"

        with pytest.raises(DuplicateConfigurationError, match="line 2"):
            parse_document(text, "yaml")

    def test_duplicate_nested_yaml_key(self):
        text = "buildTypes:\n  release:\n    minifyEnabled: false\n    minifyEnabled: true\n"

        with pytest.raises(DuplicateConfigurationError, match="minifyEnabled"):
            parse_document(text, "yaml")

    def test_duplicate_json_key(self):
        with pytest.raises(DuplicateConfigurationError):
            parse_document('{"minSdk": 21, "minSdk": 23}', "json")

    def test_invalid_yaml(self):
        with pytest.raises(DescriptorError, match="Failed to parse yaml"):
            parse_document("buildTypes: [release", "yaml")

    def test_invalid_json(self):
        with pytest.raises(DescriptorError, match="Failed to parse json"):
            parse_document("{", "json")

    def test_document_must_be_a_mapping(self):
        with pytest.raises(DescriptorError, match="must be a mapping"):
            parse_document("- release\n- debug\n", "yaml")

    def test_empty_document_fails_validation(self):
        with pytest.raises(DescriptorError, match="buildTypes"):
            load_descriptor_text("", "yaml")
