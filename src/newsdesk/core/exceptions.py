"""Exception hierarchy for newsdesk.

Every error carries a stable `code` so callers (CLI, publication results)
can report failures without matching on message text.

Usage:
    from newsdesk.core.exceptions import NewsdeskError, ModelRateLimitError
"""

from __future__ import annotations

from typing import Any


class ErrorRegistry:
    """Code -> exception class index, filled by `NewsdeskError` subclasses."""

    def __init__(self) -> None:
        self._codes: dict[str, type[NewsdeskError]] = {}

    def register(self, code: str, cls: type[NewsdeskError]) -> None:
        existing = self._codes.get(code)
        if existing is not None and existing is not cls:
            raise ValueError(f"error code '{code}' already registered by {existing.__name__}")
        self._codes[code] = cls

    def get(self, code: str) -> type[NewsdeskError] | None:
        return self._codes.get(code)

    def all(self) -> dict[str, type[NewsdeskError]]:
        return dict(self._codes)


error_registry = ErrorRegistry()


class NewsdeskError(Exception):
    """Base exception for newsdesk."""

    code: str = "INTERNAL_ERROR"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "code" in cls.__dict__:
            error_registry.register(cls.code, cls)

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


error_registry.register(NewsdeskError.code, NewsdeskError)


class ConfigurationError(NewsdeskError):
    """A collaborator is missing credentials or settings."""

    code = "CONFIGURATION_ERROR"


class ModelError(NewsdeskError):
    """Completion/embedding provider failure."""

    code = "MODEL_ERROR"

    def __init__(self, message: str = "", *, provider_info: Any = None, **details: Any) -> None:
        super().__init__(message, **details)
        self.provider_info = provider_info


class ModelRateLimitError(ModelError):
    code = "MODEL_RATE_LIMIT"


class ModelQuotaExhaustedError(ModelError):
    code = "MODEL_QUOTA_EXHAUSTED"


class ModelTimeoutError(ModelError):
    code = "MODEL_TIMEOUT"


class ResearchError(NewsdeskError):
    """A research fan-out request failed; the whole batch is rejected."""

    code = "RESEARCH_ERROR"


class ComplianceError(NewsdeskError):
    code = "COMPLIANCE_ERROR"

    def __init__(self, message: str = "", *, violations: list[str] | None = None) -> None:
        super().__init__(message)
        self.violations = list(violations or [])


class PublishError(NewsdeskError):
    code = "PUBLISH_ERROR"


class StorageError(NewsdeskError):
    code = "STORAGE_ERROR"


class NotFoundError(StorageError):
    code = "NOT_FOUND"


__all__ = [
    "ErrorRegistry",
    "error_registry",
    "NewsdeskError",
    "ConfigurationError",
    "ModelError",
    "ModelRateLimitError",
    "ModelQuotaExhaustedError",
    "ModelTimeoutError",
    "ResearchError",
    "ComplianceError",
    "PublishError",
    "StorageError",
    "NotFoundError",
]
