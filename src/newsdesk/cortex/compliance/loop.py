"""validate -> fix -> re-validate, bounded by `ComplianceConfig.max_attempts`."""

from __future__ import annotations

import logging

from newsdesk.core.types import ValidationResult
from newsdesk.cortex.retry import RetryOutcome, retry_until

from .fixer import ComplianceFixer
from .validator import validate

logger = logging.getLogger(__name__)


async def run_compliance_loop(
    markdown: str, fixer: ComplianceFixer, *, max_attempts: int = 3
) -> RetryOutcome[str, ValidationResult]:
    """At most `max_attempts` fixes. `outcome.ok` is False when violations remain."""

    async def fix(value: str, result: ValidationResult) -> str:
        return await fixer.fix(value, result.violations)

    outcome = await retry_until(
        markdown,
        validate,
        fix,
        accept=lambda result: result.valid,
        attempts=max_attempts,
    )
    if not outcome.ok:
        logger.error(
            "Compliance unresolved after %s fixes: %s",
            outcome.attempts,
            "; ".join(outcome.result.violations),
        )
    return outcome


__all__ = ["run_compliance_loop"]
