"""State flowing through the newsletter draft graph."""

from __future__ import annotations

import operator
from typing import Annotated, TypedDict

from .types import IssueContent, UrlBank


class NewsletterState(TypedDict, total=False):
    """Flow: research -> draft -> validate -> {draft | rewrite | END}."""

    # Input
    content: IssueContent
    issue_number: int

    # Research output
    research: dict[str, str]  # slot -> aggregated research text
    url_bank: UrlBank

    # Current attempt
    attempt: int  # completions made so far
    markdown: str
    finish_reason: str
    issues: list[str]

    # Best attempt so far (fewest issues)
    best_markdown: str
    best_issues: list[str]

    # Control
    done_drafting: bool
    rewrite_needed: bool

    warnings: Annotated[list[str], operator.add]


__all__ = ["NewsletterState"]
