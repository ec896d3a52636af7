from __future__ import annotations

import pytest

from newsdesk.core.config import Config
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.registry import ModelKey, Registry, model_registry


def _cfg() -> Config:
    return Config.model_validate(
        {
            "openai": {"api_key": "sk-test"},
            "perplexity": {"api_key": "pplx-test"},
            "models": {"default_llm": "openai/gpt-4.1-mini"},
        }
    )


def test_model_registry_lazy_openai_llm() -> None:
    llm = model_registry.create_llm(config=_cfg())
    assert isinstance(llm, BaseModel)
    assert type(llm).__name__ == "OpenAILLM"
    assert llm._model_name == "gpt-4.1-mini"


def test_model_registry_routes_perplexity_with_model_name() -> None:
    llm = model_registry.create_llm("perplexity/sonar-pro", config=_cfg())
    assert type(llm).__name__ == "PerplexityLLM"
    assert llm._model_name == "sonar-pro"


def test_model_registry_embeddings_use_configured_dimensions() -> None:
    embeddings = model_registry.create_embeddings("openai/text-embedding-3-small", config=_cfg())
    assert type(embeddings).__name__ == "OpenAIEmbeddings"
    assert embeddings.dimensions == _cfg().models.embedding_dim


def test_missing_api_key_is_configuration_error() -> None:
    from newsdesk.core.exceptions import ConfigurationError

    with pytest.raises(ConfigurationError):
        model_registry.create_llm("openai/gpt-4.1", config=Config())


def test_unknown_provider() -> None:
    with pytest.raises(KeyError):
        model_registry.create_llm("acme/model-1", config=_cfg())


def test_model_key_requires_provider() -> None:
    from newsdesk.core.exceptions import ConfigurationError

    assert ModelKey.parse("openai/gpt-4.1").as_str() == "openai/gpt-4.1"
    with pytest.raises(ConfigurationError):
        ModelKey.parse("gpt-4.1")


class TestRegistry:
    def test_exact_key_beats_wildcard(self):
        registry: Registry[str] = Registry(name="test")
        registry.register("acme/*", "any")
        registry.register("acme/special", "special")

        assert registry.get("acme/special") == "special"
        assert registry.get("acme/other") == "any"

    def test_collision_requires_overwrite(self):
        registry: Registry[str] = Registry(name="test")
        registry.register("acme/*", "first")

        with pytest.raises(KeyError):
            registry.register("acme/*", "second")

        registry.register("acme/*", "second", overwrite=True)
        assert registry.get("acme/x") == "second"

    def test_empty_key_rejected(self):
        registry: Registry[str] = Registry(name="test")

        with pytest.raises(ValueError):
            registry.register("  ", "x")


class TestProviderErrors:
    @pytest.mark.parametrize(
        "message,error_name",
        [
            ("Error code: 429 - rate_limit_exceeded", "ModelRateLimitError"),
            ("insufficient_quota: check your billing", "ModelQuotaExhaustedError"),
            ("Request timed out.", "ModelTimeoutError"),
        ],
    )
    def test_mapping(self, message, error_name):
        from newsdesk.modules.models.llm.openai import raise_for_provider_error
        from newsdesk.modules.models.types import ProviderInfo

        info = ProviderInfo(provider="openai", model_name="gpt-4.1", model_key="openai/gpt-4.1")

        with pytest.raises(Exception) as exc_info:
            raise_for_provider_error(RuntimeError(message), info)

        assert type(exc_info.value).__name__ == error_name

    def test_unknown_errors_pass_through(self):
        from newsdesk.modules.models.llm.openai import raise_for_provider_error
        from newsdesk.modules.models.types import ProviderInfo

        info = ProviderInfo(provider="openai", model_name="gpt-4.1", model_key="openai/gpt-4.1")

        assert raise_for_provider_error(RuntimeError("boom"), info) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, "stop"), ("length", "max_tokens"), ("content_filter", "safety"), ("tool_calls", "other")],
    )
    def test_finish_reason(self, raw, expected):
        from newsdesk.modules.models.types import map_finish_reason

        assert map_finish_reason(raw) == expected
