"""Model registry for LLMs and embeddings."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, cast

from newsdesk.core import Config, get_core_config
from newsdesk.core.exceptions import ConfigurationError

from .base import BaseEmbeddings, BaseModel

logger = logging.getLogger(__name__)

# Built-in model mappings (lazy import)
BUILTIN_LLMS: dict[str, str] = {
    "openai/*": "newsdesk.modules.models.llm.openai.OpenAILLM",
    "perplexity/*": "newsdesk.modules.models.llm.perplexity.PerplexityLLM",
}

BUILTIN_EMBEDDINGS: dict[str, str] = {
    "openai/*": "newsdesk.modules.models.embeddings.openai.OpenAIEmbeddings",
}

TItem = TypeVar("TItem")


class Registry(Generic[TItem]):
    """Minimal registry for model components."""

    def __init__(self, *, name: str, builtin_map: dict[str, str] | None = None) -> None:
        self._name = name
        self._items: dict[str, TItem] = {}
        self._builtin_map: dict[str, str] = builtin_map or {}

    def get(self, key: str) -> TItem:
        k = key.strip()
        if k in self._items:
            return self._items[k]

        wildcard = f"{k.split('/', 1)[0]}/*" if "/" in k else None
        if wildcard and wildcard in self._items:
            return self._items[wildcard]

        if k in self._builtin_map:
            slot = k
        elif wildcard and wildcard in self._builtin_map:
            slot = wildcard
        else:
            raise KeyError(f"{self._name}: unknown key '{k}'")

        # Lazy import
        mod_name, attr = self._builtin_map[slot].rsplit(".", 1)
        mod = importlib.import_module(mod_name)
        item = cast(TItem, getattr(mod, attr))
        self._items[slot] = item
        return item

    def register(self, key: str, value: TItem, *, overwrite: bool = False) -> None:
        k = key.strip()
        if not k:
            raise ValueError(f"{self._name}: registry key must be non-empty")
        if not overwrite and k in self._items and self._items[k] is not value:
            raise KeyError(f"{self._name}: '{k}' already registered")
        self._items[k] = value


@dataclass(frozen=True)
class ModelKey:
    provider: str
    name: str

    def as_str(self) -> str:
        return f"{self.provider}/{self.name}"

    @classmethod
    def parse(cls, key: str) -> "ModelKey":
        if "/" not in key:
            raise ConfigurationError(
                f"Model key must be 'provider/name' (e.g. 'openai/gpt-4.1'), got '{key}'"
            )
        provider, name = key.strip().split("/", 1)
        return cls(provider=provider, name=name)


class ModelRegistry:
    def __init__(self) -> None:
        self._llms: Registry[type[BaseModel]] = Registry(name="llms", builtin_map=BUILTIN_LLMS)
        self._embeddings: Registry[type[BaseEmbeddings]] = Registry(
            name="embeddings", builtin_map=BUILTIN_EMBEDDINGS
        )

    def register_llm(
        self, provider: str, name: str
    ) -> Callable[[type[BaseModel]], type[BaseModel]]:
        key = ModelKey(provider=provider, name=name).as_str()

        def decorator(cls: type[BaseModel]) -> type[BaseModel]:
            self._llms.register(key, cls)
            return cls

        return decorator

    def register_embeddings(
        self, provider: str, name: str
    ) -> Callable[[type[BaseEmbeddings]], type[BaseEmbeddings]]:
        key = ModelKey(provider=provider, name=name).as_str()

        def decorator(cls: type[BaseEmbeddings]) -> type[BaseEmbeddings]:
            self._embeddings.register(key, cls)
            return cls

        return decorator

    def create_llm(
        self, key: str | None = None, *, config: Config | None = None, **kwargs: object
    ) -> BaseModel:
        cfg = config or get_core_config()
        mk = ModelKey.parse(key or cfg.models.default_llm)
        cls = self._llms.get(mk.as_str())
        kwargs.setdefault("model_name", mk.name)
        logger.debug("Creating LLM %s", mk.as_str())
        ctor = cast(Callable[..., BaseModel], cls)
        return ctor(cfg, **kwargs)

    def create_embeddings(
        self, key: str | None = None, *, config: Config | None = None, **kwargs: object
    ) -> BaseEmbeddings:
        cfg = config or get_core_config()
        mk = ModelKey.parse(key or cfg.models.default_embeddings)
        cls = self._embeddings.get(mk.as_str())
        kwargs.setdefault("model_name", mk.name)
        ctor = cast(Callable[..., BaseEmbeddings], cls)
        return ctor(cfg, **kwargs)


model_registry = ModelRegistry()


__all__ = ["Registry", "ModelKey", "ModelRegistry", "model_registry"]
