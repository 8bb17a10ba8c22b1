"""Unit tests for the setting registry and run context (libgen.settings).

Tests cover:
- Declared setting order, global and immutable subsets
- Persisted (camelCase) names and round-tripping through stored dicts
- Immutability and merge semantics
- RunContext flags for empty, partial and complete configurations
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from libgen.settings import (
    GLOBAL_SETTINGS,
    IMMUTABLE_SETTINGS,
    SETTING_NAMES,
    RunContext,
    Settings,
    persisted_name,
)

pytestmark = pytest.mark.unit


class TestRegistry:
    def test_declared_order(self):
        assert SETTING_NAMES[0] == "github_user"
        assert SETTING_NAMES[-1] == "enable_quality_checks"
        assert len(SETTING_NAMES) == 15
        assert SETTING_NAMES.index("bintray_sign_files") < SETTING_NAMES.index("maven_central_sync")

    def test_global_settings_are_registered(self):
        assert GLOBAL_SETTINGS <= set(SETTING_NAMES)
        assert "lib_name" not in GLOBAL_SETTINGS
        assert "author_email" in GLOBAL_SETTINGS

    def test_immutable_settings(self):
        assert IMMUTABLE_SETTINGS == {"lib_name", "lib_package", "lib_version"}

    @pytest.mark.parametrize(
        "name, stored",
        [
            ("lib_name", "libName"),
            ("github_user", "githubUser"),
            ("maven_central_sync", "mavenCentralSync"),
        ],
    )
    def test_persisted_name(self, name, stored):
        assert persisted_name(name) == stored


class TestSettings:
    def test_from_stored_ignores_unknown_keys(self):
        settings = Settings.from_stored({"libName": "x", "usedGeneratorVersion": "0.0.1"})
        assert settings.lib_name == "x"
        assert settings.github_user is None

    def test_to_stored_uses_persisted_names_and_skips_unanswered(self, full_settings):
        stored = Settings(lib_name="x", bintray_sign_files=False).to_stored()
        assert stored == {"libName": "x", "bintraySignFiles": False}
        assert Settings.from_stored(full_settings.to_stored()) == full_settings

    def test_frozen(self, full_settings):
        with pytest.raises(ValidationError):
            full_settings.lib_name = "other"

    def test_merge_returns_new_instance(self):
        original = Settings(lib_name="x")
        merged = original.merge({"lib_group": "com.acme", "not_a_setting": 1})
        assert merged.lib_group == "com.acme"
        assert merged.lib_name == "x"
        assert original.lib_group is None
        assert not hasattr(merged, "not_a_setting")

    def test_missing(self):
        settings = Settings(github_user="octocat")
        missing = settings.missing()
        assert "github_user" not in missing
        assert missing[0] == "author_name"
        assert len(missing) == 14


class TestRunContext:
    def test_empty_configuration_is_first_run(self):
        context = RunContext.from_stored(Settings(), generator_version="0.1.0")
        assert context.update_mode is False
        assert context.all_answered is False
        assert context.used_generator_version is None

    def test_partial_configuration_is_update_with_questions(self):
        context = RunContext.from_stored(Settings(lib_name="x"), generator_version="0.1.0")
        assert context.update_mode is True
        assert context.all_answered is False

    def test_complete_configuration(self, full_settings):
        context = RunContext.from_stored(
            full_settings, generator_version="0.2.0", used_generator_version="0.1.0"
        )
        assert context.update_mode is True
        assert context.all_answered is True
        assert context.used_generator_version == "0.1.0"
        assert context.generator_version == "0.2.0"

    def test_false_counts_as_answered(self, full_settings):
        settings = full_settings.merge({"bintray_sign_files": False})
        context = RunContext.from_stored(settings, generator_version="0.1.0")
        assert context.all_answered is True
