"""Configuration settings for the instructor RAG service."""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    app_name: str = "Instructor Reviews RAG Service"
    app_version: str = "1.0.0"
    api_prefix: str = "/api"
    debug: bool = False

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    # OpenAI Configuration (embeddings + chat completion)
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RAG_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_embedding_model: str = "text-embedding-3-small"
    openai_embedding_dimensions: int = 1536
    openai_chat_model: str = "gpt-4o-mini"

    # Pinecone Configuration
    pinecone_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RAG_PINECONE_API_KEY", "PINECONE_API_KEY"),
    )
    pinecone_index_name: str = "rag2"
    pinecone_namespace: str = "ns2"

    # Retrieval Configuration
    retrieval_top_k: int = Field(default=3, ge=1)
    include_metadata: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RAG_",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields in .env file
        populate_by_name=True,
    )

    @field_validator("openai_api_key", "pinecone_api_key")
    @classmethod
    def _strip_key(cls, value: Optional[str]) -> Optional[str]:
        # Keys pasted into .env files often carry trailing newlines
        return value.strip() if value else value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the process-wide settings once, at startup."""
    return Settings()
