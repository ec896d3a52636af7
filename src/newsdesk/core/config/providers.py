"""Provider configurations for external services."""

from pydantic import BaseModel, ConfigDict


class OpenAIConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    organization: str | None = None
    base_url: str | None = None


class PerplexityConfig(BaseModel):
    """Perplexity API configuration (LLM with search)."""

    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    base_url: str = "https://api.perplexity.ai"
    # "day" | "week" | "month" | "" (no filter)
    search_recency_filter: str = "week"


class PostgresConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dsn: str = ""
    pool_min_size: int = 1
    pool_max_size: int = 5


class GoogleDocsConfig(BaseModel):
    """Service-account credentials for the document publisher."""

    model_config = ConfigDict(extra="ignore")

    service_account_email: str = ""
    # PEM; literal "\n" sequences from .env files are unescaped on load
    private_key: str = ""
    folder_id: str = ""
    editor_email: str = ""
    timeout_sec: float = 60.0


class ImagesConfig(BaseModel):
    """Hero image generation (Pollinations-compatible URL API)."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    base_url: str = "https://image.pollinations.ai/prompt"
    width: int = 1200
    height: int = 675
    timeout_sec: float = 60.0


__all__ = [
    "OpenAIConfig",
    "PerplexityConfig",
    "PostgresConfig",
    "GoogleDocsConfig",
    "ImagesConfig",
]
