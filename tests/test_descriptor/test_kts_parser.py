"""Tests for the Gradle Kotlin DSL parser."""

import pytest

from gradlebox.core.errors import DuplicateConfigurationError
from gradlebox.descriptor.kts_parser import (
    Assign,
    Call,
    CallExpr,
    KtsSyntaxError,
    Reference,
    kts_to_document,
    parse_kts,
    plain_value,
    tokenize,
)


def to_document(source):
    return kts_to_document(parse_kts(source))


class TestTokenizer:
    def test_comments_and_whitespace_are_dropped(self):
        tokens = tokenize('// line\n/* block\n comment */ minSdk = 21\n')

        assert [(t.kind, t.text) for t in tokens] == [
            ("ident", "minSdk"),
            ("punct", "="),
            ("number", "21"),
        ]
        assert tokens[0].line == 3

    def test_unexpected_character(self):
        with pytest.raises(KtsSyntaxError, match="line 2"):
            tokenize("android {\n  val x = if (a > b) 1 else 2\n}")


class TestParser:
    def test_statement_tree(self):
        statements = parse_kts(
            'android {\n    compileSdk = 34\n    signingConfig = signingConfigs.getByName("debug")\n}'
        )

        assert len(statements) == 1
        android = statements[0]
        assert isinstance(android, Call)
        assert android.name == "android"
        assert android.body == [
            Assign("compileSdk", 34, 2),
            Assign(
                "signingConfig",
                CallExpr("signingConfigs.getByName", ("debug",)),
                3,
            ),
        ]

    def test_plugin_infix_words(self):
        (plugins,) = parse_kts(
            'plugins {\n    id("com.android.application") version "8.7.0" apply false\n}'
        )

        (plugin,) = plugins.body
        assert plugin.args == ("com.android.application",)
        assert plugin.infix == {"version": "8.7.0", "apply": False}

    def test_escaped_strings(self):
        (statement,) = parse_kts('versionName = "say \\"hi\\""')

        assert statement.value == 'say "hi"'

    @pytest.mark.parametrize(
        "source",
        [
            "android {\n    minSdk = 21\n",
            "}",
            "android minSdk",
            "minSdk = ",
            "implementation(\"a:b:1\"",
        ],
    )
    def test_syntax_errors(self, source):
        with pytest.raises(KtsSyntaxError):
            parse_kts(source)

    def test_plain_value(self):
        assert plain_value(Reference("flutter.minSdkVersion")) == "flutter.minSdkVersion"
        assert plain_value(CallExpr("file", ("upload.jks",))) == "upload.jks"
        with pytest.raises(KtsSyntaxError):
            plain_value(CallExpr("listOf", ("a", "b")))


class TestDocumentMapping:
    def test_flutter_app_script(self, flutter_app_kts):
        document = to_document(flutter_app_kts)

        assert document["plugins"] == [
            "com.android.application",
            "kotlin-android",
            "dev.flutter.flutter-gradle-plugin",
        ]
        assert document["namespace"] == "com.ziehro.satwatcher"
        assert document["ndkVersion"] == "27.0.12077973"
        assert document["compileSdk"] == "flutter.compileSdkVersion"
        assert document["compileOptions"] == {
            "sourceCompatibility": "JavaVersion.VERSION_11",
            "targetCompatibility": "JavaVersion.VERSION_11",
            "isCoreLibraryDesugaringEnabled": True,
        }
        assert document["kotlinOptions"] == {"jvmTarget": "11"}
        assert document["defaultConfig"]["minSdk"] == "flutter.minSdkVersion"
        assert document["buildTypes"] == {
            "release": {
                "signingConfig": "debug",
                "proguardFiles": ["proguard-android-optimize.txt", "proguard-rules.pro"],
                "isMinifyEnabled": False,
                "isShrinkResources": False,
            }
        }
        assert document["dependencies"] == [
            {
                "coordinate": "com.android.tools:desugar_jdk_libs:2.1.3",
                "scope": "coreLibraryDesugaring",
            },
            {"coordinate": "androidx.work:work-runtime:2.9.0", "scope": "implementation"},
        ]
        assert document["flutter"] == {"source": "../.."}

    def test_named_elements_and_signing_configs(self):
        document = to_document(
            """
            android {
                signingConfigs {
                    create("upload") {
                        storeFile = file("upload.jks")
                        keyAlias = "upload"
                        storePassword = "secret"
                    }
                }
                buildTypes {
                    getByName("debug") {
                        applicationIdSuffix = ".debug"
                    }
                    create("staging") {
                        isDebuggable = true
                    }
                }
            }
            """
        )

        assert document["signingConfigs"] == {
            "upload": {"storeFile": "upload.jks", "keyAlias": "upload"}
        }
        assert document["buildTypes"] == {
            "debug": {"applicationIdSuffix": ".debug"},
            "staging": {"isDebuggable": True},
        }

    def test_kotlin_plugin_shorthand(self):
        document = to_document('plugins {\n    kotlin("android")\n}')

        assert document["plugins"] == ["org.jetbrains.kotlin.android"]

    def test_unknown_blocks_and_keys_are_ignored(self):
        document = to_document(
            """
            repositories { google() }
            android {
                lint { abortOnError = false }
                defaultConfig {
                    minSdk = 21
                    testInstrumentationRunner = "androidx.test.runner.AndroidJUnitRunner"
                }
                buildTypes { release { } }
            }
            """
        )

        assert document == {
            "defaultConfig": {"minSdk": 21},
            "buildTypes": {"release": {}},
        }

    def test_duplicate_assignment_in_block(self):
        with pytest.raises(DuplicateConfigurationError, match="minSdk"):
            to_document("android {\n defaultConfig {\n minSdk = 21\n minSdk = 23\n }\n}")

    def test_repeated_build_type_is_merged(self):
        document = to_document(
            """
            android {
                buildTypes {
                    release { isMinifyEnabled = true }
                    getByName("release") { isShrinkResources = true }
                }
            }
            """
        )

        assert document["buildTypes"] == {
            "release": {"isMinifyEnabled": True, "isShrinkResources": True}
        }

    def test_repeated_build_type_key_is_duplicate(self):
        with pytest.raises(DuplicateConfigurationError, match="buildTypes.release"):
            to_document(
                "android {\n buildTypes {\n release { isMinifyEnabled = true }\n"
                ' getByName("release") { isMinifyEnabled = false }\n }\n}'
            )

    def test_repeated_dependencies_blocks_are_merged(self):
        document = to_document(
            """
            dependencies {
                implementation("androidx.work:work-runtime:2.9.0")
            }
            dependencies {
                implementation("androidx.core:core:1.12.0")
            }
            """
        )

        assert document["dependencies"] == [
            {"coordinate": "androidx.work:work-runtime:2.9.0", "scope": "implementation"},
            {"coordinate": "androidx.core:core:1.12.0", "scope": "implementation"},
        ]

    def test_repeated_android_blocks_are_merged(self):
        document = to_document(
            """
            android {
                namespace = "com.example.app"
                defaultConfig { minSdk = 21 }
            }
            android {
                compileSdk = 34
                defaultConfig { targetSdk = 34 }
            }
            """
        )

        assert document == {
            "namespace": "com.example.app",
            "compileSdk": 34,
            "defaultConfig": {"minSdk": 21, "targetSdk": 34},
        }

    def test_key_repeated_across_blocks_is_duplicate(self):
        with pytest.raises(DuplicateConfigurationError, match="minSdk"):
            to_document(
                "android {\n defaultConfig { minSdk = 21 }\n}\n"
                "android {\n defaultConfig { minSdk = 23 }\n}"
            )

    def test_parse_tree_is_not_modified_by_merging(self):
        statements = parse_kts("dependencies { api(\"a:b:1\") }\ndependencies { api(\"c:d:1\") }")

        kts_to_document(statements)

        assert [len(statement.body) for statement in statements] == [1, 1]

    def test_quoted_strings_stay_literal(self):
        document = to_document(
            """
            android {
                ndkVersion = flutter.ndkVersion
                defaultConfig {
                    versionName = "beta.rc"
                    versionCode = flutter.versionCode
                }
            }
            """
        )

        assert document["ndkVersion"] == {"ref": "flutter.ndkVersion"}
        assert document["defaultConfig"] == {
            "versionName": "beta.rc",
            "versionCode": "flutter.versionCode",
        }

    def test_dependency_must_be_a_coordinate(self):
        with pytest.raises(KtsSyntaxError):
            to_document("dependencies {\n implementation(files(\"libs/a.jar\", \"libs/b.jar\"))\n}")
