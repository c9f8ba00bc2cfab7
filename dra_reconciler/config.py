# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Configuration management for the data repository association reconciler.

This module handles loading and validating configuration from environment
variables with sensible defaults.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    In production, these should be set via environment variables
    or a .env file.
    """

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the handler server to",
        validation_alias=AliasChoices("DRA_SERVER_HOST", "HOST")
    )
    port: int = Field(
        default=8080,
        description="Port to run the handler server on",
        validation_alias=AliasChoices("DRA_SERVER_PORT", "PORT")
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
        validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
        validation_alias="DEBUG"
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region of the FSx file systems",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION")
    )

    # Stabilization Configuration
    poll_interval_seconds: float = Field(
        default=5.0,
        description="Delay between lifecycle polls while a step stabilizes",
        validation_alias="DRA_POLL_INTERVAL_SECONDS",
        ge=0.0,
    )
    max_wait_minutes: float = Field(
        default=120.0,
        description=(
            "Maximum time a step may wait for the association lifecycle to settle. "
            "FSx runs association operations one at a time per file system, so "
            "this is large."
        ),
        validation_alias="DRA_MAX_WAIT_MINUTES",
        gt=0.0,
    )
    max_polls_per_invocation: Optional[int] = Field(
        default=None,
        description=(
            "Lifecycle polls allowed in one invocation before handing control "
            "back to the caller with an IN_PROGRESS event (unset = poll until done)"
        ),
        validation_alias="DRA_MAX_POLLS_PER_INVOCATION",
        ge=1,
    )
    callback_delay_seconds: int = Field(
        default=5,
        description="Delay the caller should wait before re-invoking an IN_PROGRESS operation",
        validation_alias="DRA_CALLBACK_DELAY_SECONDS",
        ge=0,
    )

    # CloudWatch Configuration
    cloudwatch_enabled: bool = Field(
        default=False,
        description="Enable CloudWatch logging",
        validation_alias="CLOUDWATCH_ENABLED"
    )
    cloudwatch_log_group: str = Field(
        default="/fsx/data-repository-association",
        description="CloudWatch log group name",
        validation_alias="CLOUDWATCH_LOG_GROUP"
    )
    cloudwatch_log_stream: Optional[str] = Field(
        default=None,
        description="CloudWatch log stream name (auto-generated if not set)",
        validation_alias="CLOUDWATCH_LOG_STREAM"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def max_wait_seconds(self) -> float:
        """Maximum stabilization wait expressed in seconds."""
        return self.max_wait_minutes * 60


def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and .env file.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Get the global settings instance.

    Creates the settings instance on first call and caches it.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings
