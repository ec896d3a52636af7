"""Core layer: configuration, exceptions and domain records."""

from __future__ import annotations

from .config import Config, get_core_config, set_core_config
from .exceptions import NewsdeskError

__all__ = ["Config", "get_core_config", "set_core_config", "NewsdeskError"]
