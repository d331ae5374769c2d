"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and the .env
file without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class ModelConfig(BaseModel):
    """Language model configuration used by the model gateway."""

    provider: str = Field(
        default="openai", alias="PLANCRAFT_AI_MODEL_PROVIDER", description="Model provider (openai, anthropic, google)"
    )
    name: str = Field(default="gpt-4o", alias="PLANCRAFT_AI_MODEL_NAME", description="Model name for the provider")
    temperature: float = Field(default=0.2, alias="PLANCRAFT_AI_MODEL_TEMPERATURE", description="Sampling temperature")
    max_tokens: int = Field(default=4096, alias="PLANCRAFT_AI_MODEL_MAX_TOKENS", description="Maximum output tokens")
    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY", description="OpenAI API key")
    anthropic_api_key: Optional[SecretStr] = Field(
        default=None, alias="ANTHROPIC_API_KEY", description="Anthropic API key"
    )
    google_api_key: Optional[SecretStr] = Field(default=None, alias="GOOGLE_API_KEY", description="Google API key")

    model_config = {"populate_by_name": True}


class MediaGenerationConfig(BaseModel):
    """Image and video generation service configuration."""

    image_api_url: Optional[str] = Field(
        default=None, alias="IMAGE_GENERATION_API_URL", description="Endpoint accepting {prompt} and returning {url}"
    )
    video_api_url: Optional[str] = Field(
        default=None, alias="VIDEO_GENERATION_API_URL", description="Endpoint accepting {prompt} and returning {url}"
    )
    api_key: Optional[SecretStr] = Field(
        default=None, alias="MEDIA_GENERATION_API_KEY", description="Bearer key for the generation services"
    )

    model_config = {"populate_by_name": True}


class EmbeddingConfig(BaseModel):
    """Embedding service configuration used by the asset vector index."""

    api_url: Optional[str] = Field(
        default=None, alias="EMBEDDING_API_URL", description="Endpoint accepting {input, model} and returning vectors"
    )
    api_key: Optional[SecretStr] = Field(default=None, alias="EMBEDDING_API_KEY", description="Embedding API key")
    model: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL", description="Embedding model name")

    model_config = {"populate_by_name": True}


class FacebookConfig(BaseModel):
    """Facebook Graph API configuration shared by all projects."""

    graph_api_url: str = Field(
        default="https://graph.facebook.com/v18.0", alias="FACEBOOK_GRAPH_API_URL", description="Graph API base URL"
    )
    app_access_token: Optional[SecretStr] = Field(
        default=None, alias="FACEBOOK_APP_ACCESS_TOKEN", description="App token used for public post searches"
    )

    model_config = {"populate_by_name": True}


class TikTokConfig(BaseModel):
    """TikTok API configuration."""

    api_url: str = Field(default="https://open.tiktokapis.com/v2", alias="TIKTOK_API_URL", description="API base URL")

    model_config = {"populate_by_name": True}


class LinkedInConfig(BaseModel):
    """LinkedIn API configuration."""

    api_url: str = Field(default="https://api.linkedin.com/v2", alias="LINKEDIN_API_URL", description="API base URL")

    model_config = {"populate_by_name": True}


class EngineConfig(BaseModel):
    """Plan execution engine tuning."""

    tool_result_max_chars: int = Field(
        default=4000, alias="PLANCRAFT_AI_TOOL_RESULT_MAX_CHARS", description="Upper bound of tool result text"
    )
    history_window: int = Field(
        default=20, alias="PLANCRAFT_AI_HISTORY_WINDOW", description="Chat messages included in model prompts"
    )
    semantic_search_top_n: int = Field(
        default=5, alias="PLANCRAFT_AI_SEMANTIC_SEARCH_TOP_N", description="Assets returned by semantic search"
    )
    browse_max_chars: int = Field(
        default=3000, alias="PLANCRAFT_AI_BROWSE_MAX_CHARS", description="Page text kept by the browse_web tool"
    )
    http_timeout_seconds: float = Field(
        default=30.0, alias="PLANCRAFT_AI_HTTP_TIMEOUT_SECONDS", description="Timeout for integration HTTP calls"
    )
    recurrence_poll_seconds: float = Field(
        default=0.0,
        alias="PLANCRAFT_AI_RECURRENCE_POLL_SECONDS",
        description="Interval of the recurring objective scheduler in the server (0 disables it)",
    )

    model_config = {"populate_by_name": True}


class LogfireConfig(BaseModel):
    """Logfire monitoring configuration."""

    enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED", description="Enable Logfire tracing")
    token: Optional[SecretStr] = Field(default=None, alias="LOGFIRE_TOKEN", description="Logfire write token")
    service_name: str = Field(default="plancraft-ai", alias="LOGFIRE_SERVICE_NAME", description="Service name")
    environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT", description="Deployment environment")
    trace_pydantic_ai: bool = Field(default=True, alias="LOGFIRE_TRACE_PYDANTIC_AI")
    trace_httpx: bool = Field(default=True, alias="LOGFIRE_TRACE_HTTPX")
    trace_sqlalchemy: bool = Field(default=True, alias="LOGFIRE_TRACE_SQLALCHEMY")
    trace_fastapi: bool = Field(default=True, alias="LOGFIRE_TRACE_FASTAPI")

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
    Grouped settings are exposed as read-only properties.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="PlanCraft-AI server host address to bind to",
        alias="PLANCRAFT_AI_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="PlanCraft-AI server port number",
        alias="PLANCRAFT_AI_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="PLANCRAFT_AI_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="Log line format (simple, detailed, json)", alias="LOG_FORMAT")
    log_file_dir: str = Field(default="logs", description="Directory for the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(default=False, description="Also log to a file", alias="ENABLE_FILE_LOGGING")

    # =====================================================================
    # Persistence
    # =====================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="Async database URL; in-memory repositories are used when unset",
        alias="DATABASE_URL",
    )

    # =====================================================================
    # Grouped Configuration Sources
    # =====================================================================
    # Grouped models read their own aliases from the same environment, so the
    # raw values are kept here and regrouped on access.
    model_provider: str = Field(default="openai", alias="PLANCRAFT_AI_MODEL_PROVIDER")
    model_name: str = Field(default="gpt-4o", alias="PLANCRAFT_AI_MODEL_NAME")
    model_temperature: float = Field(default=0.2, alias="PLANCRAFT_AI_MODEL_TEMPERATURE")
    model_max_tokens: int = Field(default=4096, alias="PLANCRAFT_AI_MODEL_MAX_TOKENS")
    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[SecretStr] = Field(default=None, alias="ANTHROPIC_API_KEY")
    google_api_key: Optional[SecretStr] = Field(default=None, alias="GOOGLE_API_KEY")

    image_api_url: Optional[str] = Field(default=None, alias="IMAGE_GENERATION_API_URL")
    video_api_url: Optional[str] = Field(default=None, alias="VIDEO_GENERATION_API_URL")
    media_api_key: Optional[SecretStr] = Field(default=None, alias="MEDIA_GENERATION_API_KEY")

    embedding_api_url: Optional[str] = Field(default=None, alias="EMBEDDING_API_URL")
    embedding_api_key: Optional[SecretStr] = Field(default=None, alias="EMBEDDING_API_KEY")
    embedding_model: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL")

    facebook_graph_api_url: str = Field(default="https://graph.facebook.com/v18.0", alias="FACEBOOK_GRAPH_API_URL")
    facebook_app_access_token: Optional[SecretStr] = Field(default=None, alias="FACEBOOK_APP_ACCESS_TOKEN")
    tiktok_api_url: str = Field(default="https://open.tiktokapis.com/v2", alias="TIKTOK_API_URL")
    linkedin_api_url: str = Field(default="https://api.linkedin.com/v2", alias="LINKEDIN_API_URL")

    tool_result_max_chars: int = Field(default=4000, alias="PLANCRAFT_AI_TOOL_RESULT_MAX_CHARS")
    history_window: int = Field(default=20, alias="PLANCRAFT_AI_HISTORY_WINDOW")
    semantic_search_top_n: int = Field(default=5, alias="PLANCRAFT_AI_SEMANTIC_SEARCH_TOP_N")
    browse_max_chars: int = Field(default=3000, alias="PLANCRAFT_AI_BROWSE_MAX_CHARS")
    http_timeout_seconds: float = Field(default=30.0, alias="PLANCRAFT_AI_HTTP_TIMEOUT_SECONDS")
    recurrence_poll_seconds: float = Field(default=0.0, alias="PLANCRAFT_AI_RECURRENCE_POLL_SECONDS")

    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: Optional[SecretStr] = Field(default=None, alias="LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="plancraft-ai", alias="LOGFIRE_SERVICE_NAME")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")
    logfire_trace_pydantic_ai: bool = Field(default=True, alias="LOGFIRE_TRACE_PYDANTIC_AI")
    logfire_trace_httpx: bool = Field(default=True, alias="LOGFIRE_TRACE_HTTPX")
    logfire_trace_sqlalchemy: bool = Field(default=True, alias="LOGFIRE_TRACE_SQLALCHEMY")
    logfire_trace_fastapi: bool = Field(default=True, alias="LOGFIRE_TRACE_FASTAPI")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    def _grouped(self) -> dict:
        return self.model_dump(by_alias=True)

    @property
    def model(self) -> ModelConfig:
        """Get language model configuration."""
        return ModelConfig.model_validate(self._grouped())

    @property
    def media(self) -> MediaGenerationConfig:
        """Get image/video generation configuration."""
        return MediaGenerationConfig.model_validate(self._grouped())

    @property
    def embedding(self) -> EmbeddingConfig:
        """Get embedding service configuration."""
        return EmbeddingConfig.model_validate(self._grouped())

    @property
    def facebook(self) -> FacebookConfig:
        """Get Facebook Graph API configuration."""
        return FacebookConfig.model_validate(self._grouped())

    @property
    def tiktok(self) -> TikTokConfig:
        """Get TikTok API configuration."""
        return TikTokConfig.model_validate(self._grouped())

    @property
    def linkedin(self) -> LinkedInConfig:
        """Get LinkedIn API configuration."""
        return LinkedInConfig.model_validate(self._grouped())

    @property
    def engine(self) -> EngineConfig:
        """Get plan execution engine tuning."""
        return EngineConfig.model_validate(self._grouped())

    @property
    def logfire(self) -> LogfireConfig:
        """Get Logfire monitoring configuration."""
        return LogfireConfig.model_validate(self._grouped())

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration."""
        return CORSConfig.model_validate(self._grouped())


settings = Settings()
