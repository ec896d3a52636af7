"""LLM auto-fix for compliance violations."""

from __future__ import annotations

import logging

from newsdesk.core.config import ComplianceConfig
from newsdesk.core.exceptions import ComplianceError
from newsdesk.cortex.graphs.newsletter.style_guide import STYLE_RULES
from newsdesk.modules.markdown import strip_code_fence
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest

logger = logging.getLogger(__name__)

FIX_PROMPT = """You are fixing a newsletter draft that has violated the style guide rules.

VIOLATIONS TO FIX:
{violations}

STYLE GUIDE RULES:
{rules}

ORIGINAL DRAFT:
{markdown}

YOUR TASK:
Fix ALL the violations listed above while preserving the content and structure.

SPECIFIC FIXES NEEDED:
- Remove all punctuation from headers (colons, dashes, commas)
- Embed all bare URLs as [natural anchor text](url)
- Move emojis out of body text (headers, bullets and line starts only)
- Replace "click here" links with natural 3-9 word phrases
- Remove duplicate URL links (keep only the first occurrence)
- Strip tracking parameters (utm_*, ref=, share=) from all URLs
- Replace "According to" with direct statements

Return ONLY the corrected Markdown. Do not add explanations or commentary."""


class ComplianceFixer:
    def __init__(self, model: BaseModel, config: ComplianceConfig | None = None) -> None:
        self._model = model
        self._config = config or ComplianceConfig()

    async def fix(self, markdown: str, violations: list[str]) -> str:
        """One rewrite call. Resolving every violation is not guaranteed."""
        logger.info("Attempting to fix %s violations", len(violations))
        prompt = FIX_PROMPT.format(
            violations="\n".join(f"{i}. {v}" for i, v in enumerate(violations, 1)),
            rules=STYLE_RULES,
            markdown=markdown,
        )
        try:
            response = await self._model.generate(
                ModelRequest.from_prompt(
                    prompt,
                    temperature=self._config.fix_temperature,
                    max_output_tokens=self._config.fix_max_tokens,
                )
            )
        except Exception as e:
            logger.error("Compliance fix failed: %s", e)
            raise ComplianceError(f"Failed to fix violations: {e}", violations=violations) from e

        fixed = strip_code_fence(response.text)
        if not fixed:
            raise ComplianceError("Fix returned an empty draft", violations=violations)
        logger.info("Fixes applied")
        return fixed


__all__ = ["FIX_PROMPT", "ComplianceFixer"]
