"""Core test fixtures for the gradlebox project."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from gradlebox.config.user_config import UserConfig
from gradlebox.descriptor.models import Descriptor
from gradlebox.resolution.providers import (
    InMemorySigningConfigRegistry,
    MappingSdkDefaults,
)
from gradlebox.resolution.resolver import VariantResolver


FLUTTER_APP_KTS = """\
plugins {
    id("com.android.application")
    id("kotlin-android")
    id("dev.flutter.flutter-gradle-plugin")
}

android {
    ndkVersion = "27.0.12077973"
    namespace = "com.ziehro.satwatcher"
    compileSdk = flutter.compileSdkVersion

    compileOptions {
        sourceCompatibility = JavaVersion.VERSION_11
        targetCompatibility = JavaVersion.VERSION_11
        isCoreLibraryDesugaringEnabled = true
    }

    kotlinOptions {
        jvmTarget = "11"
    }

    defaultConfig {
        applicationId = "com.ziehro.satwatcher"
        minSdk = flutter.minSdkVersion
        targetSdk = flutter.targetSdkVersion
        versionCode = flutter.versionCode
        versionName = flutter.versionName
    }

    buildTypes {
        release {
            signingConfig = signingConfigs.getByName("debug")
            proguardFiles(getDefaultProguardFile("proguard-android-optimize.txt"), "proguard-rules.pro")
            isMinifyEnabled = false
            isShrinkResources = false
        }
    }
}

dependencies {
    // Desugaring library for java.time on older devices
    coreLibraryDesugaring("com.android.tools:desugar_jdk_libs:2.1.3")

    implementation("androidx.work:work-runtime:2.9.0")
}

flutter {
    source = "../.."
}
"""

TEST_SDK_DEFAULTS: dict[str, int | str] = {
    "flutter.compileSdkVersion": 35,
    "flutter.minSdkVersion": 21,
    "flutter.targetSdkVersion": 35,
    "flutter.ndkVersion": "26.3.11579264",
    "flutter.versionCode": 1,
    "flutter.versionName": "1.0",
    "compileSdk": 34,
    "minSdk": 21,
    "targetSdk": 34,
}


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def sdk_defaults() -> MappingSdkDefaults:
    """SDK defaults covering Flutter references and omitted SDK fields."""
    return MappingSdkDefaults(TEST_SDK_DEFAULTS)


@pytest.fixture
def resolver(sdk_defaults: MappingSdkDefaults) -> VariantResolver:
    """Serial resolver with test SDK defaults and only the debug signing config."""
    return VariantResolver(
        sdk_defaults=sdk_defaults, signing_configs=InMemorySigningConfigRegistry()
    )


@pytest.fixture
def flutter_app_kts() -> str:
    """build.gradle.kts of a Flutter application module."""
    return FLUTTER_APP_KTS


# ---- Descriptor Factories ----


@pytest.fixture
def release_document() -> Callable[..., dict[str, Any]]:
    """Factory for a single-release-build-type descriptor document.

    Usage:
        def test_something(release_document):
            document = release_document(desugaring=False)
    """

    def _create(desugaring: bool = True, **overrides: Any) -> dict[str, Any]:
        document: dict[str, Any] = {
            "plugins": ["com.android.application"],
            "namespace": "com.example.app",
            "compileOptions": {"coreLibraryDesugaringEnabled": desugaring},
            "buildTypes": {
                "release": {
                    "signingConfig": "debug",
                    "minifyEnabled": False,
                    "shrinkResources": False,
                }
            },
            "dependencies": [
                {"coordinate": "com.example:lib:2.1.3", "scope": "coreLibraryDesugaring"},
                {"coordinate": "androidx.work:work-runtime:2.9.0", "scope": "implementation"},
            ],
        }
        document.update(overrides)
        return document

    return _create


@pytest.fixture
def make_descriptor(
    release_document: Callable[..., dict[str, Any]],
) -> Callable[..., Descriptor]:
    """Factory building a validated Descriptor from ``release_document``."""

    def _create(**overrides: Any) -> Descriptor:
        return Descriptor.model_validate(release_document(**overrides))

    return _create


@pytest.fixture
def descriptor_file(tmp_path: Path, release_document: Callable[..., dict[str, Any]]):
    """Factory writing a YAML descriptor into ``tmp_path``."""

    def _write(name: str = "app.yaml", **overrides: Any) -> Path:
        path = tmp_path / name
        with path.open("w") as f:
            yaml.safe_dump(release_document(**overrides), f, sort_keys=False)
        return path

    return _write


# ---- Test Isolation Fixtures ----


@pytest.fixture
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run the test in ``tmp_path`` with no user configuration in reach.

    Clears GRADLEBOX_ environment variables and points XDG_CONFIG_HOME and HOME
    at the temporary directory.
    """
    for key in list(os.environ):
        if key.startswith("GRADLEBOX_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def isolated_config(isolated_environment: Path) -> UserConfig:
    """UserConfig loaded from a config file with test SDK defaults."""
    config_file = isolated_environment / "gradlebox.yaml"
    with config_file.open("w") as f:
        yaml.safe_dump(
            {
                "log_level": "INFO",
                "sdk_defaults": TEST_SDK_DEFAULTS,
                "signing_configs": ["upload"],
            },
            f,
        )
    return UserConfig(cli_config_path=config_file)
