"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file)
once per process. No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class OpenAISettings(BaseSettings):
    """OpenAI account configuration shared by embedding and chat calls."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL used for embeddings",
    )

    @property
    def is_configured(self) -> bool:
        """True when a non-empty API key is present."""
        return bool(self.api_key and self.api_key.get_secret_value())


class EmbeddingSettings(BaseSettings):
    """Embedding model configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=".env",
        extra="ignore",
    )

    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    dimensions: int = Field(
        default=512,
        gt=0,
        description="Embedding vector length expected by the index",
    )


class PineconeSettings(BaseSettings):
    """Pinecone vector index configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PINECONE_",
        env_file=".env",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Pinecone API key",
    )
    index_host: str | None = Field(
        default=None,
        description="Index host URL, e.g. https://my-index-abc123.svc.pinecone.io",
    )
    index_name: str | None = Field(
        default=None,
        description="Index name (used for logging and readiness)",
    )

    @property
    def is_configured(self) -> bool:
        """True when key, host and index name are all present."""
        return bool(
            self.api_key
            and self.api_key.get_secret_value()
            and self.index_host
            and self.index_name
        )


class LLMSettings(BaseSettings):
    """Chat-completion configuration.

    Requests go through an OpenAI-compatible gateway (e.g. Cloudflare AI
    Gateway) that forwards to the provider.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    model: str = Field(
        default="gpt-4o-mini",
        description="Model name to use for generation",
    )
    gateway_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("LLM_GATEWAY_URL", "CLOUDFLARE_GATEWAY_URL"),
        description="Gateway base URL; /chat/completions is appended",
    )
    max_tokens: int = Field(
        default=1000,
        description="Maximum tokens in response",
    )
    temperature: float = Field(
        default=0.0,
        description="Sampling temperature (0 = deterministic)",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Pipeline settings
    top_k: int = Field(
        default=5,
        ge=1,
        description="Maximum number of matches requested from the index",
    )
    content_field: str = Field(
        default="document_content",
        description="Metadata field holding a match's text",
    )
    http_timeout: float = Field(
        default=60.0,
        description="Network timeout for outbound calls in seconds",
    )

    # Nested settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    pinecone: PineconeSettings = Field(default_factory=PineconeSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
