"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class AgentRuntimeConfig(BaseModel):
    """Agent action runtime configuration."""

    command_timeout: float = Field(
        default=120.0,
        alias="DESKMATE_AI_COMMAND_TIMEOUT",
        description="Maximum seconds a shell command may run before it is reported as failed",
    )
    audit_append_attempts: int = Field(
        default=5,
        alias="DESKMATE_AI_AUDIT_APPEND_ATTEMPTS",
        description="Lock acquisition attempts before an audit append blocks unconditionally",
    )
    audit_append_backoff: float = Field(
        default=0.01,
        alias="DESKMATE_AI_AUDIT_APPEND_BACKOFF",
        description="Initial backoff in seconds between audit append attempts",
    )

    model_config = {"populate_by_name": True}


class LLMRuntimeConfig(BaseModel):
    """Provider pipeline configuration."""

    http_timeout: float = Field(
        default=60.0, alias="DESKMATE_AI_HTTP_TIMEOUT", description="Timeout in seconds for provider HTTP calls"
    )
    stream_chunk_delay: float = Field(
        default=0.05,
        alias="DESKMATE_AI_STREAM_CHUNK_DELAY",
        description="Pause in seconds between simulated streaming chunks",
    )
    context_window: int = Field(
        default=10,
        alias="DESKMATE_AI_CONTEXT_WINDOW",
        description="Number of most recent chat messages sent to the provider",
    )

    model_config = {"populate_by_name": True}


class OpenAIConfig(BaseModel):
    """OpenAI API configuration used to seed the default provider config."""

    api_key: Optional[str] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    model: str = Field(default="gpt-3.5-turbo", alias="OPENAI_MODEL", description="Default OpenAI model to use")
    base_url: Optional[str] = Field(
        default=None, alias="OPENAI_BASE_URL", description="Custom OpenAI API base URL (optional)"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="127.0.0.1",
        description="DeskMate-AI server host address to bind to",
        alias="DESKMATE_AI_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="DeskMate-AI server port number",
        alias="DESKMATE_AI_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="DESKMATE_AI_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="Log line format (simple, detailed, json)", alias="LOG_FORMAT")
    log_file_dir: str = Field(default="logs", description="Directory for the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Whether to also log to a file", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./deskmate_ai.db",
        description="Async SQLAlchemy connection URL for the chat/config record store",
        alias="DATABASE_URL",
    )

    # =====================================================================
    # Runtime tuning (flat fields, grouped through the properties below)
    # =====================================================================
    command_timeout: float = Field(default=120.0, alias="DESKMATE_AI_COMMAND_TIMEOUT")
    audit_append_attempts: int = Field(default=5, alias="DESKMATE_AI_AUDIT_APPEND_ATTEMPTS")
    audit_append_backoff: float = Field(default=0.01, alias="DESKMATE_AI_AUDIT_APPEND_BACKOFF")
    http_timeout: float = Field(default=60.0, alias="DESKMATE_AI_HTTP_TIMEOUT")
    stream_chunk_delay: float = Field(default=0.05, alias="DESKMATE_AI_STREAM_CHUNK_DELAY")
    context_window: int = Field(default=10, alias="DESKMATE_AI_CONTEXT_WINDOW")

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-3.5-turbo", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def agent(self) -> AgentRuntimeConfig:
        """Get agent runtime configuration from environment variables."""
        return AgentRuntimeConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def llm(self) -> LLMRuntimeConfig:
        """Get provider pipeline configuration from environment variables."""
        return LLMRuntimeConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
