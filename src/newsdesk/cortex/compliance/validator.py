"""validate(markdown) -> ValidationResult over every registered rule."""

from __future__ import annotations

import logging

from newsdesk.core.types import ValidationResult

from .rules import COMPLIANCE_RULES

logger = logging.getLogger(__name__)


def validate(markdown: str) -> ValidationResult:
    violations: list[str] = []
    for rule in COMPLIANCE_RULES:
        violations.extend(rule.check(markdown))

    result = ValidationResult(valid=not violations, violations=violations)
    if result.valid:
        logger.info("Compliance validation passed")
    else:
        logger.info("Compliance found %s violations", len(violations))
        for violation in violations:
            logger.info("  - %s", violation)
    return result


__all__ = ["validate"]
