"""Compliance validator: style rules, LLM auto-fix, final heuristics."""

from __future__ import annotations

from .final_check import final_check
from .fixer import ComplianceFixer
from .loop import run_compliance_loop
from .rules import COMPLIANCE_RULES, ComplianceRule, compliance_rule
from .validator import validate

__all__ = [
    "COMPLIANCE_RULES",
    "ComplianceRule",
    "compliance_rule",
    "validate",
    "ComplianceFixer",
    "final_check",
    "run_compliance_loop",
]
