"""Tests for theme resolution and settings files."""

import pytest
from pydantic import ValidationError

from termprompt.config import ConfigError, Settings, config_path, load_settings, save_settings
from termprompt.prompts import TextPrompt
from termprompt.theme import DEFAULT_THEME, Theme, resolve_theme


class TestTheme:
    """Test cases for theme resolution."""

    def test_partial_override_is_deep_merged(self):
        theme = resolve_theme({"colors": {"primary": "#FF00FF", "text": {"secondary": "grey50"}}})

        assert theme.colors.primary == "#FF00FF"
        assert theme.colors.text.secondary == "grey50"
        assert theme.colors.text.error == DEFAULT_THEME.colors.text.error
        assert theme.colors.border == DEFAULT_THEME.colors.border

    def test_default_theme_is_never_mutated(self):
        resolve_theme({"colors": {"primary": "red"}})
        assert DEFAULT_THEME.colors.primary == "#007AFF"

        with pytest.raises(ValidationError):
            DEFAULT_THEME.colors.primary = "red"

    def test_unknown_tokens_are_rejected(self):
        with pytest.raises(ValidationError):
            resolve_theme({"colors": {"sparkle": "gold"}})

    def test_prompts_resolve_their_own_theme(self):
        plain = TextPrompt("a")
        custom = TextPrompt("b", theme={"typography": {"message": "underline"}})

        assert plain.theme is DEFAULT_THEME
        assert custom.theme.typography.message == "underline"
        assert isinstance(custom.theme, Theme)


class TestSettings:
    """Test cases for settings loading."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "nope.yaml")

        assert settings == Settings()
        assert settings.select_limit == 5
        assert settings.autocomplete_debounce == 0.3
        assert settings.retry_delay == 1.0

    def test_values_are_loaded(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "select_limit: 8\n"
            "spinner: arc\n"
            "theme:\n"
            "  colors:\n"
            "    primary: magenta\n"
        )

        settings = load_settings(path)

        assert settings.select_limit == 8
        assert settings.spinner == "arc"
        assert settings.resolved_theme().colors.primary == "magenta"

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("select_limit: 0\n")

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_invalid_theme_tokens(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("theme:\n  colours: {}\n")

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_broken_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("select_limit: [1, 2\n")

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "from-env.yaml"
        path.write_text("log_level: DEBUG\n")
        monkeypatch.setenv("TERMPROMPT_CONFIG", str(path))

        assert config_path() == path
        assert load_settings().log_level == "DEBUG"

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings(autocomplete_limit=3, theme={"colors": {"error": "red"}})

        assert save_settings(settings, path) == path
        assert load_settings(path) == settings
