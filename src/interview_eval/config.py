"""Configuration management using pydantic-settings."""

import warnings
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ChunkUnit(str, Enum):
    """Unit used to measure chunk size."""

    WORDS = "words"
    TOKENS = "tokens"


class EmbeddingSettings(BaseSettings):
    """Embedding configuration (OpenAI-compatible endpoint)."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for embeddings. Env var: OPENAI_API_KEY",
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Optional OpenAI base URL (advanced). Env var: OPENAI_BASE_URL",
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name. Env var: EMBEDDING_MODEL",
    )
    embedding_dimension: Optional[int] = Field(
        default=None,
        description="Expected embedding dimension, used for validation. Env var: EMBEDDING_DIMENSION",
    )
    embedding_timeout: float = Field(
        default=30.0,
        description="Embedding request timeout in seconds. Env var: EMBEDDING_TIMEOUT",
    )

    @property
    def is_configured(self) -> bool:
        """Check if the embedding provider is configured."""
        return bool(self.openai_api_key)


class LLMSettings(BaseSettings):
    """Text completion configuration (LiteLLM model routing)."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    default_model_name: str = Field(
        default="gemini/gemini-2.5-flash",
        description="Completion model name in LiteLLM format. Env var: DEFAULT_MODEL_NAME",
    )
    llm_timeout: float = Field(
        default=60.0,
        description="Completion request timeout in seconds. Env var: LLM_TIMEOUT",
    )

    gemini_api_key: Optional[str] = Field(
        default=None, description="Google Gemini API key. Env var: GEMINI_API_KEY"
    )
    openai_api_key: Optional[str] = Field(
        default=None, description="OpenAI API key. Env var: OPENAI_API_KEY"
    )
    anthropic_api_key: Optional[str] = Field(
        default=None, description="Anthropic API key. Env var: ANTHROPIC_API_KEY"
    )

    # Question generation favours variety, evaluation favours consistency
    question_temperature: float = Field(
        default=0.8, description="Temperature for question generation. Env var: QUESTION_TEMPERATURE"
    )
    question_max_tokens: int = Field(
        default=800, description="Token ceiling for question generation. Env var: QUESTION_MAX_TOKENS"
    )
    evaluation_temperature: float = Field(
        default=0.5, description="Temperature for answer evaluation. Env var: EVALUATION_TEMPERATURE"
    )
    evaluation_max_tokens: int = Field(
        default=2048, description="Token ceiling for answer evaluation. Env var: EVALUATION_MAX_TOKENS"
    )

    @property
    def has_gemini(self) -> bool:
        """Check if Gemini is configured."""
        return bool(self.gemini_api_key)

    @property
    def has_openai(self) -> bool:
        """Check if OpenAI is configured."""
        return bool(self.openai_api_key)

    @property
    def has_anthropic(self) -> bool:
        """Check if Anthropic is configured."""
        return bool(self.anthropic_api_key)


class ChunkingSettings(BaseSettings):
    """Text chunking configuration."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    chunk_size: int = Field(
        default=500, description="Chunk size in chunk units. Env var: CHUNK_SIZE"
    )
    chunk_unit: ChunkUnit = Field(
        default=ChunkUnit.WORDS,
        description="Unit used to measure chunks: words or tokens. Env var: CHUNK_UNIT",
    )
    tokenizer_encoding: str = Field(
        default="cl100k_base",
        description="tiktoken encoding used when CHUNK_UNIT=tokens. Env var: TOKENIZER_ENCODING",
    )

    @field_validator("chunk_unit", mode="before")
    @classmethod
    def parse_chunk_unit(cls, v):
        """Accept chunk unit names case-insensitively."""
        if isinstance(v, str):
            return v.lower()
        return v


class RetrySettings(BaseSettings):
    """Retry configuration for transient provider failures."""

    model_config = SettingsConfigDict(env_prefix="RETRY_", case_sensitive=False)

    max_attempts: int = Field(
        default=3, description="Total attempts per provider call. Env var: RETRY_MAX_ATTEMPTS"
    )
    base_delay: float = Field(
        default=1.0,
        description="Delay before the first retry in seconds, doubled each attempt. Env var: RETRY_BASE_DELAY",
    )
    max_delay: float = Field(
        default=30.0, description="Maximum delay between retries in seconds. Env var: RETRY_MAX_DELAY"
    )


class RetrievalSettings(BaseSettings):
    """Retrieval and document text limits."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    top_k: int = Field(default=3, description="Resume chunks used as context. Env var: TOP_K")
    min_extracted_chars: int = Field(
        default=100,
        description="Minimum extracted PDF text length. Env var: MIN_EXTRACTED_CHARS",
    )
    max_jd_chars: int = Field(
        default=4000,
        description="Job description characters sent to question generation. Env var: MAX_JD_CHARS",
    )
    min_jd_chars: int = Field(
        default=50,
        description="Minimum job description length for question generation. Env var: MIN_JD_CHARS",
    )


class StorageSettings(BaseSettings):
    """Azure Blob Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", case_sensitive=False)

    account_name: Optional[str] = Field(default=None, description="Azure Storage Account name")
    connection_string: Optional[str] = Field(
        default=None, description="Azure Storage connection string"
    )
    use_managed_identity: bool = Field(
        default=True, description="Use Managed Identity for authentication"
    )
    container_name: str = Field(
        default="interview-prep", description="Container holding uploaded documents"
    )

    @property
    def is_configured(self) -> bool:
        """Check if storage is configured."""
        return bool(self.connection_string) or (
            bool(self.account_name) and self.use_managed_identity
        )


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="interview-eval", description="Application name. Env var: APP_NAME")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment. Env var: ENVIRONMENT",
    )
    debug: bool = Field(default=False, description="Enable debug mode. Env var: DEBUG")
    log_level: str = Field(default="INFO", description="Logging level. Env var: LOG_LEVEL")

    embedding: Optional[EmbeddingSettings] = None
    llm: Optional[LLMSettings] = None
    chunking: Optional[ChunkingSettings] = None
    retry: Optional[RetrySettings] = None
    retrieval: Optional[RetrievalSettings] = None
    storage: Optional[StorageSettings] = None

    @model_validator(mode="after")
    def initialize_nested_settings(self) -> "Settings":
        """Initialize nested settings to ensure they read from environment."""
        if self.embedding is None:
            self.embedding = EmbeddingSettings()
        if self.llm is None:
            self.llm = LLMSettings()
        if self.chunking is None:
            self.chunking = ChunkingSettings()
        if self.retry is None:
            self.retry = RetrySettings()
        if self.retrieval is None:
            self.retrieval = RetrievalSettings()
        if self.storage is None:
            self.storage = StorageSettings()
        return self

    @field_validator("environment", mode="before")
    @classmethod
    def parse_environment(cls, v):
        """Parse environment from string."""
        if isinstance(v, str):
            try:
                return Environment(v.lower())
            except ValueError:
                return Environment.DEVELOPMENT
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def validate_configuration(self) -> None:
        """Warn about providers that are not configured."""
        if not self.embedding.is_configured:
            warnings.warn(
                "Embeddings are not configured. Set OPENAI_API_KEY (and optionally OPENAI_BASE_URL).",
                UserWarning,
            )
        if not self.storage.is_configured:
            warnings.warn(
                "Azure Blob Storage is not configured. Set STORAGE_CONNECTION_STRING or "
                "STORAGE_ACCOUNT_NAME with STORAGE_USE_MANAGED_IDENTITY=true",
                UserWarning,
            )

    def validate_production_settings(self) -> None:
        """Validate that production settings are secure."""
        if self.is_production:
            if self.debug:
                raise ValueError("DEBUG must be False in production")
            if not self.embedding.is_configured:
                raise ValueError("Embeddings must be configured in production. Set OPENAI_API_KEY.")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.validate_configuration()
        try:
            _settings.validate_production_settings()
        except ValueError as e:
            import logging

            logging.error(f"Configuration validation failed: {e}")
            if _settings.is_production:
                raise
    return _settings
