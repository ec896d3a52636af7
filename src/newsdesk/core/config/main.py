"""Main configuration class that combines all config modules."""

import logging
import tomllib
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .base import get_bool_env, get_env, get_int_env, get_list_env
from .models import LLMConfig, ModelsConfig
from .pipeline import ComplianceConfig, DiscoveryConfig, DraftConfig, PublicationConfig
from .providers import (
    GoogleDocsConfig,
    ImagesConfig,
    OpenAIConfig,
    PerplexityConfig,
    PostgresConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_TOML_NAME = "settings.toml"


class Config(BaseModel):
    """Main configuration class for newsdesk.

    Configuration is loaded from multiple sources in priority order:
    1. Environment variables
    2. TOML configuration file
    3. Default values
    """

    model_config = ConfigDict(extra="ignore")

    # Core settings
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    draft: DraftConfig = Field(default_factory=DraftConfig)
    compliance: ComplianceConfig = Field(default_factory=ComplianceConfig)
    publication: PublicationConfig = Field(default_factory=PublicationConfig)

    # Provider configurations
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    perplexity: PerplexityConfig = Field(default_factory=PerplexityConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    google_docs: GoogleDocsConfig = Field(default_factory=GoogleDocsConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)

    # Internal state
    loaded_from: list[Path] = Field(default_factory=list)

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "Config":
        """Load configuration from files and environment."""
        load_dotenv()

        env_path = get_env("NEWSDESK_CONFIG_PATH")
        toml_path = (
            Path(config_path)
            if config_path
            else (Path(env_path).resolve() if env_path else Path.cwd() / DEFAULT_TOML_NAME)
        )

        config = cls()
        if toml_path.exists():
            try:
                with open(toml_path, "rb") as f:
                    toml_data = tomllib.load(f)

                config_dict = config.model_dump(by_alias=True)
                for key, value in toml_data.items():
                    if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
                        config_dict[key].update(value)
                    else:
                        config_dict[key] = value
                config = cls.model_validate(config_dict)
                config.loaded_from.append(toml_path)
            except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
                logger.warning("Failed to load TOML config from %s: %s", toml_path, e)

        config._apply_env_overrides()
        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to config."""
        # Model configuration
        if v := get_env("NEWSDESK_DEFAULT_LLM"):
            self.models.default_llm = v
        if v := get_env("NEWSDESK_JUDGE_LLM"):
            self.models.judge_llm = v
        if v := get_env("NEWSDESK_RESEARCH_LLM"):
            self.models.research_llm = v
        if v := get_env("NEWSDESK_SEARCH_LLM"):
            self.models.search_llm = v
        if v := get_env("NEWSDESK_EMBEDDINGS"):
            self.models.default_embeddings = v

        # OpenAI configuration
        if v := get_env("OPENAI_API_KEY"):
            self.openai.api_key = v
        if v := get_env("OPENAI_ORGANIZATION"):
            self.openai.organization = v

        # Perplexity configuration
        if v := get_env("PERPLEXITY_API_KEY"):
            self.perplexity.api_key = v

        # Storage
        if v := get_env("DATABASE_URL"):
            self.postgres.dsn = v

        # Google Docs
        if v := get_env("GOOGLE_SERVICE_ACCOUNT_EMAIL"):
            self.google_docs.service_account_email = v
        if v := get_env("GOOGLE_PRIVATE_KEY"):
            self.google_docs.private_key = v.replace("\\n", "\n")
        if v := get_env("GOOGLE_DRIVE_FOLDER_ID"):
            self.google_docs.folder_id = v
        if v := get_env("EDITOR_EMAIL"):
            self.google_docs.editor_email = v

        # Images
        images_enabled = get_bool_env("NEWSDESK_IMAGES_ENABLED")
        if images_enabled is not None:
            self.images.enabled = images_enabled

        # Pipeline
        if v := get_env("NEWSDESK_NEWSLETTER_NAME"):
            self.draft.newsletter_name = v
        if (score := get_int_env("NEWSDESK_MIN_RELEVANCE_SCORE")) is not None:
            self.discovery.min_relevance_score = score
        if queries := get_list_env("NEWSDESK_SEARCH_QUERIES"):
            self.discovery.search_queries = queries
        override = get_bool_env("NEWSDESK_ALLOW_PUBLISH_WITH_VIOLATIONS")
        if override is not None:
            self.compliance.allow_publish_with_violations = override

        # Debug/Logging
        if debug_val := get_bool_env("NEWSDESK_DEBUG"):
            self.debug = debug_val
        if log_level := get_env("NEWSDESK_LOG_LEVEL"):
            self.log_level = log_level


# ---- Global config management ----

_GLOBAL_CONFIG: Config | None = None


def get_core_config() -> Config:
    """Return process-global core config (for the CLI and entrypoints)."""
    global _GLOBAL_CONFIG
    if _GLOBAL_CONFIG is None:
        _GLOBAL_CONFIG = Config.load()
    return _GLOBAL_CONFIG


def set_core_config(config: Config) -> None:
    """Set the global core config."""
    global _GLOBAL_CONFIG
    _GLOBAL_CONFIG = config


__all__ = ["Config", "get_core_config", "set_core_config"]
