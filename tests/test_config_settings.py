"""
Unit tests for config settings module.

This module tests backend settings, host input parsing and the helpers
that keep credentials out of diagnostics.
"""

import pytest
from pydantic import SecretStr

from config.settings import (
    ActionInputs,
    DeliverySettings,
    MonitoringSettings,
    Settings,
    SummarizerSettings,
    export_config,
    get_settings,
    mask_secret,
)

INPUT_VARIABLES = [
    "INPUT_CHANGES",
    "INPUT_BLACKBOX-API-KEY",
    "INPUT_BLACKBOX_API_KEY",
    "INPUT_API-KEY",
    "INPUT_API_KEY",
    "INPUT_API-URL",
    "INPUT_API_URL",
    "INPUT_MODEL",
    "GITHUB_REPOSITORY",
    "GITHUB_REF_NAME",
    "GITHUB_WORKSPACE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in INPUT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSummarizerSettings:
    """Test cases for SummarizerSettings."""

    def test_summarizer_settings_defaults(self):
        settings = SummarizerSettings()

        assert settings.base_url == "https://api.blackbox.ai"
        assert settings.completions_path == "/chat/completions"
        assert settings.completions_url == "https://api.blackbox.ai/chat/completions"
        assert settings.default_model == "blackboxai"
        assert settings.timeout == 30.0
        assert settings.temperature == 0.3
        assert settings.max_tokens == 300
        assert settings.user_agent == "GitHub-Action-Summarizer/1.0"

    def test_summarizer_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("SUMMARIZER_TIMEOUT", "12.5")
        monkeypatch.setenv("SUMMARIZER_BASE_URL", "http://localhost:9000/")

        settings = SummarizerSettings()

        assert settings.timeout == 12.5
        assert settings.base_url == "http://localhost:9000"

    def test_summarizer_settings_validation(self):
        with pytest.raises(ValueError):
            SummarizerSettings(base_url="api.blackbox.ai")
        with pytest.raises(ValueError):
            SummarizerSettings(timeout=0)


class TestDeliverySettings:
    """Test cases for DeliverySettings."""

    def test_delivery_settings_defaults(self):
        settings = DeliverySettings()

        assert settings.endpoint_suffix == "/generate-content"
        assert settings.timeout == 30.0
        assert settings.user_agent == "GitHub-Action-Send-Changes/1.0"
        assert settings.placeholder_response == "No API configured - summary generated only"
        assert settings.unknown_repository == "unknown/repository"

    def test_endpoint_suffix_is_normalized(self):
        assert DeliverySettings(endpoint_suffix="ingest/").endpoint_suffix == "/ingest"

    def test_empty_endpoint_suffix_rejected(self):
        with pytest.raises(ValueError):
            DeliverySettings(endpoint_suffix="/")


class TestMonitoringSettings:
    """Test cases for MonitoringSettings."""

    def test_log_level_is_upper_cased(self):
        assert MonitoringSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            MonitoringSettings(log_level="verbose")


class TestSettings:
    """Test cases for the main Settings object."""

    def test_settings_groups(self):
        settings = Settings()

        assert isinstance(settings.summarizer, SummarizerSettings)
        assert isinstance(settings.delivery, DeliverySettings)
        assert isinstance(settings.monitoring, MonitoringSettings)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_export_config_has_no_secrets(self):
        exported = export_config(Settings())

        assert exported["summarizer"]["completions_url"] == "https://api.blackbox.ai/chat/completions"
        assert exported["delivery"]["endpoint_suffix"] == "/generate-content"
        assert "api_key" not in str(exported)


class TestActionInputs:
    """Host input parsing."""

    def test_reads_dashed_input_names(self, clean_env):
        clean_env.setenv("INPUT_CHANGES", "  Manual summary  ")
        clean_env.setenv("INPUT_BLACKBOX-API-KEY", " bb-key ")
        clean_env.setenv("INPUT_API-KEY", "collector-key")
        clean_env.setenv("INPUT_API-URL", "https://collector.example.com")
        clean_env.setenv("INPUT_MODEL", "gpt-4o")
        clean_env.setenv("GITHUB_REPOSITORY", "owner/repo")
        clean_env.setenv("GITHUB_REF_NAME", "main")

        inputs = ActionInputs()

        assert inputs.changes == "Manual summary"
        assert inputs.blackbox_api_key.get_secret_value() == "bb-key"
        assert inputs.api_key.get_secret_value() == "collector-key"
        assert inputs.api_url == "https://collector.example.com"
        assert inputs.model == "gpt-4o"
        assert inputs.repository == "owner/repo"
        assert inputs.ref_name == "main"

    def test_reads_underscored_input_names(self, clean_env):
        clean_env.setenv("INPUT_BLACKBOX_API_KEY", "bb-key")
        clean_env.setenv("INPUT_API_URL", "http://localhost:3000")

        inputs = ActionInputs()

        assert inputs.blackbox_api_key.get_secret_value() == "bb-key"
        assert inputs.api_url == "http://localhost:3000"

    def test_defaults(self, clean_env):
        inputs = ActionInputs()

        assert inputs.changes == ""
        assert inputs.blackbox_api_key.get_secret_value() == ""
        assert inputs.api_url == ""

    def test_to_run_configuration(self, clean_env):
        clean_env.setenv("INPUT_BLACKBOX-API-KEY", "bb-key")
        clean_env.setenv("INPUT_API-URL", "https://collector.example.com")
        clean_env.setenv("GITHUB_WORKSPACE", "/github/workspace")

        config = ActionInputs().to_run_configuration("blackboxai")

        assert config.model == "blackboxai"
        assert config.summary_api_key.get_secret_value() == "bb-key"
        assert config.delivery_configured
        assert config.repo_path == "/github/workspace"

    def test_explicit_repo_path_wins(self, clean_env):
        clean_env.setenv("GITHUB_WORKSPACE", "/github/workspace")

        config = ActionInputs().to_run_configuration(repo_path="/tmp/checkout")

        assert config.repo_path == "/tmp/checkout"

    def test_secrets_are_hidden_in_repr(self, clean_env):
        clean_env.setenv("INPUT_BLACKBOX-API-KEY", "bb-very-secret")

        assert "bb-very-secret" not in repr(ActionInputs())


class TestMaskSecret:
    """Credential rendering."""

    def test_long_secret_keeps_prefix(self):
        assert mask_secret("sk-1234567890abcdef") == "sk-1... (19 chars)"

    def test_short_secret_shows_only_length(self):
        assert mask_secret("abc123") == "... (6 chars)"

    def test_secret_str(self):
        assert mask_secret(SecretStr("sk-1234567890abcdef")).startswith("sk-1...")

    def test_empty(self):
        assert mask_secret("") == "<not set>"
        assert mask_secret(SecretStr("")) == "<not set>"
