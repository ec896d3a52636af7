"""Modular configuration system for newsdesk."""

from .base import get_bool_env, get_env, get_int_env, get_list_env
from .main import Config, get_core_config, set_core_config
from .models import LLMConfig, ModelsConfig
from .pipeline import (
    DEFAULT_SEARCH_QUERIES,
    ComplianceConfig,
    DiscoveryConfig,
    DraftConfig,
    PublicationConfig,
)
from .providers import (
    GoogleDocsConfig,
    ImagesConfig,
    OpenAIConfig,
    PerplexityConfig,
    PostgresConfig,
)

__all__ = [
    # Main classes
    "Config",
    # Main functions
    "get_core_config",
    "set_core_config",
    # Base utilities
    "get_env",
    "get_bool_env",
    "get_int_env",
    "get_list_env",
    # Model configs
    "ModelsConfig",
    "LLMConfig",
    # Pipeline configs
    "DEFAULT_SEARCH_QUERIES",
    "DiscoveryConfig",
    "DraftConfig",
    "ComplianceConfig",
    "PublicationConfig",
    # Provider configs
    "OpenAIConfig",
    "PerplexityConfig",
    "PostgresConfig",
    "GoogleDocsConfig",
    "ImagesConfig",
]
