"""Style rules. Each rule is a pure `markdown -> list[str]` check.

Rules are registered in order with `@compliance_rule(name)`; `validate` runs all
of them and never short-circuits.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable

from newsdesk.modules.markdown import contains_emoji, starts_with_emoji
from newsdesk.utils.urls import MARKDOWN_LINK_RE, markdown_links

RuleFn = Callable[[str], list[str]]

HEADER_PUNCTUATION_RE = re.compile(r"^#{1,6}\s+[^:\n]*[:,-]", re.MULTILINE)
HEADING_RE = re.compile(r"^#{1,6}\s", re.MULTILINE)
BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s")
URL_RE = re.compile(r"https?://", re.IGNORECASE)
GENERIC_ANCHOR_RE = re.compile(r"\[(click here|read more|learn more)\]", re.IGNORECASE)
TRACKING_PARAM_RE = re.compile(r"[?&](utm_|ref=|share=)")
ACCORDING_TO_RE = re.compile(r"(?:^|[.!?])\s*according to", re.IGNORECASE | re.MULTILINE)

MAX_ACCORDING_TO = 2


@dataclass(frozen=True)
class ComplianceRule:
    name: str
    check: RuleFn


COMPLIANCE_RULES: list[ComplianceRule] = []


def compliance_rule(name: str) -> Callable[[RuleFn], RuleFn]:
    def decorator(fn: RuleFn) -> RuleFn:
        COMPLIANCE_RULES.append(ComplianceRule(name=name, check=fn))
        return fn

    return decorator


@compliance_rule("header_punctuation")
def header_punctuation(markdown: str) -> list[str]:
    found = HEADER_PUNCTUATION_RE.findall(markdown)
    if not found:
        return []
    return [
        f"Found {len(found)} headers with punctuation (colons, dashes, commas). "
        "Headers must have no punctuation."
    ]


@compliance_rule("bare_urls")
def bare_urls(markdown: str) -> list[str]:
    outside_links = MARKDOWN_LINK_RE.sub("", markdown)
    found = URL_RE.findall(outside_links)
    if not found:
        return []
    return [f"Found {len(found)} bare URLs. All URLs must be embedded as [text](url)."]


@compliance_rule("emoji_in_body")
def emoji_in_body(markdown: str) -> list[str]:
    offending = [
        line
        for line in markdown.split("\n")
        if contains_emoji(line)
        and not HEADING_RE.match(line)
        and not BULLET_RE.match(line)
        and not starts_with_emoji(line)
    ]
    if not offending:
        return []
    return [
        f"Found emojis in body text on {len(offending)} lines. "
        "Emojis are only allowed in headers and bullet points."
    ]


@compliance_rule("generic_anchors")
def generic_anchors(markdown: str) -> list[str]:
    found = GENERIC_ANCHOR_RE.findall(markdown)
    if not found:
        return []
    return [
        f'Found {len(found)} "click here" style links. Use natural 3-9 word phrases instead.'
    ]


@compliance_rule("duplicate_urls")
def duplicate_urls(markdown: str) -> list[str]:
    counts = Counter(url for _, url in markdown_links(markdown))
    duplicates = [url for url, count in counts.items() if count > 1]
    if not duplicates:
        return []
    return [
        f"Found {len(duplicates)} duplicate URLs. Each URL should appear only once: "
        + ", ".join(duplicates)
    ]


@compliance_rule("tracking_params")
def tracking_params(markdown: str) -> list[str]:
    found = TRACKING_PARAM_RE.findall(markdown)
    if not found:
        return []
    return [
        f"Found {len(found)} URLs with tracking parameters (utm_, ref=, share=). "
        "Remove all tracking parameters."
    ]


@compliance_rule("has_headers")
def has_headers(markdown: str) -> list[str]:
    if HEADING_RE.search(markdown):
        return []
    return ["No headers found. Must use # for H1, ## for H2, ### for H3."]


@compliance_rule("according_to")
def according_to(markdown: str) -> list[str]:
    count = len(ACCORDING_TO_RE.findall(markdown))
    if count <= MAX_ACCORDING_TO:
        return []
    return [
        f'Found multiple instances of "According to" ({count}). Minimize explicit attribution.'
    ]


__all__ = ["ComplianceRule", "COMPLIANCE_RULES", "compliance_rule", "MAX_ACCORDING_TO"]
