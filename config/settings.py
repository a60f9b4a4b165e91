"""
Configuration management for the commit summary action.

This module provides centralized configuration with:
- Backend settings for the summarization and delivery endpoints
- Logging settings
- Host input parsing (GitHub Actions ``INPUT_*`` variables)
- Helpers for rendering credentials and settings safely in diagnostics
"""

from typing import Optional, Dict, Any
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings import BaseSettings as PydanticBaseSettings

from shared.models import RunConfiguration


DEFAULT_MODEL = "blackboxai"


class SummarizerSettings(BaseSettings):
    """Summarization backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SUMMARIZER_", extra="ignore")

    base_url: str = Field(default="https://api.blackbox.ai", description="API base URL")
    completions_path: str = Field(
        default="/chat/completions", description="Chat completions endpoint path"
    )
    default_model: str = Field(default=DEFAULT_MODEL, description="Model used when none is given")
    timeout: float = Field(default=30.0, gt=0, description="Request deadline in seconds")
    temperature: float = Field(default=0.3, ge=0, le=2, description="Sampling temperature")
    max_tokens: int = Field(default=300, gt=0, description="Maximum tokens per summary")
    user_agent: str = Field(default="GitHub-Action-Summarizer/1.0", description="User-Agent header")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("Summarizer URL must be HTTP/HTTPS")
        return v.rstrip("/")

    @field_validator("completions_path")
    @classmethod
    def validate_completions_path(cls, v):
        return v if v.startswith("/") else f"/{v}"

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}{self.completions_path}"


class DeliverySettings(BaseSettings):
    """Delivery backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DELIVERY_", extra="ignore")

    endpoint_suffix: str = Field(
        default="/generate-content", description="Path segment every delivery URL ends with"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request deadline in seconds")
    user_agent: str = Field(
        default="GitHub-Action-Send-Changes/1.0", description="User-Agent header"
    )
    placeholder_response: str = Field(
        default="No API configured - summary generated only",
        description="Response output used when delivery is skipped",
    )
    unknown_repository: str = Field(
        default="unknown/repository", description="Repository reported when none can be resolved"
    )

    @field_validator("endpoint_suffix")
    @classmethod
    def validate_endpoint_suffix(cls, v):
        v = v.rstrip("/")
        if not v:
            raise ValueError("Endpoint suffix cannot be empty")
        return v if v.startswith("/") else f"/{v}"


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONITORING_", extra="ignore")

    log_level: str = Field(default="INFO", description="Logging level")
    log_body_limit: int = Field(
        default=2000, ge=0, description="Maximum characters of a remote body in logs (0 = no limit)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class Settings(PydanticBaseSettings):
    """
    Main application settings.

    Every group can be overridden from the environment, for example
    ``SUMMARIZER_TIMEOUT=10`` or ``MONITORING_LOG_LEVEL=debug``.
    """

    app_name: str = Field(default="commit-summary-action", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    summarizer: SummarizerSettings = Field(default_factory=SummarizerSettings)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


class ActionInputs(BaseSettings):
    """
    Values supplied by the CI host.

    GitHub Actions exposes ``with:`` inputs as ``INPUT_<NAME>`` environment
    variables, keeping dashes in the name (``INPUT_BLACKBOX-API-KEY``). The
    underscore spelling is accepted too for runners that rewrite names.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    changes: str = Field(default="", validation_alias=AliasChoices("INPUT_CHANGES"))
    blackbox_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("INPUT_BLACKBOX-API-KEY", "INPUT_BLACKBOX_API_KEY"),
    )
    api_key: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("INPUT_API-KEY", "INPUT_API_KEY")
    )
    api_url: str = Field(
        default="", validation_alias=AliasChoices("INPUT_API-URL", "INPUT_API_URL")
    )
    model: str = Field(default="", validation_alias=AliasChoices("INPUT_MODEL"))
    repository: str = Field(default="", validation_alias=AliasChoices("GITHUB_REPOSITORY"))
    ref_name: str = Field(default="", validation_alias=AliasChoices("GITHUB_REF_NAME"))
    workspace: str = Field(default="", validation_alias=AliasChoices("GITHUB_WORKSPACE"))

    @field_validator("changes", "api_url", "model", "repository", "ref_name", "workspace")
    @classmethod
    def strip_input(cls, v):
        return v.strip()

    @field_validator("blackbox_api_key", "api_key")
    @classmethod
    def strip_secret(cls, v):
        return SecretStr(v.get_secret_value().strip())

    def to_run_configuration(
        self, default_model: str = DEFAULT_MODEL, repo_path: Optional[str] = None
    ) -> RunConfiguration:
        """Freeze the inputs into the configuration handed to the pipeline."""
        return RunConfiguration(
            supplied_summary=self.changes,
            summary_api_key=self.blackbox_api_key,
            delivery_api_key=self.api_key,
            delivery_url=self.api_url,
            model=self.model or default_model,
            repository=self.repository,
            ref_name=self.ref_name,
            repo_path=repo_path or self.workspace or ".",
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration object

    Example:
        >>> settings = get_settings()
        >>> print(settings.summarizer.completions_url)
    """
    return Settings()


def mask_secret(value: Any, visible: int = 4) -> str:
    """Render a credential for logs: a short prefix and its length, never the full value."""
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    if not value:
        return "<not set>"
    prefix = value[:visible] if len(value) > visible * 2 else ""
    return f"{prefix}... ({len(value)} chars)"


def export_config(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Export configuration for diagnostics.

    Returns:
        Dict[str, Any]: Configuration export (without sensitive data)
    """
    settings = settings or get_settings()
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "debug": settings.debug,
        "summarizer": {
            "completions_url": settings.summarizer.completions_url,
            "default_model": settings.summarizer.default_model,
            "timeout": settings.summarizer.timeout,
            "temperature": settings.summarizer.temperature,
            "max_tokens": settings.summarizer.max_tokens,
        },
        "delivery": {
            "endpoint_suffix": settings.delivery.endpoint_suffix,
            "timeout": settings.delivery.timeout,
        },
        "monitoring": {
            "log_level": settings.monitoring.log_level,
            "log_body_limit": settings.monitoring.log_body_limit,
        },
    }
