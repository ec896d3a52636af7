"""URL helpers: tracking-param cleanup, source domains, link extraction."""

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {"utm_source", "utm_medium", "utm_campaign", "utm_content", "utm_term", "ref", "share"}
)

MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
BARE_URL_RE = re.compile(r"https?://[^\s)\]>\"']+")


def clean_url(url: str) -> str:
    """Drop tracking query parameters; unparseable input is returned as-is."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    query = [
        (k, v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
        if k not in TRACKING_PARAMS and not k.startswith("utm_")
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


def extract_source(url: str) -> str:
    """Hostname without `www.`, or "Unknown Source"."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        host = None
    if not host:
        return "Unknown Source"
    return re.sub(r"^www\.", "", host)


def markdown_links(text: str) -> list[tuple[str, str]]:
    """All `[anchor](url)` pairs in order of appearance."""
    return [(m.group(1), m.group(2)) for m in MARKDOWN_LINK_RE.finditer(text)]


def extract_citations(text: str) -> list[str]:
    """URLs cited in free text: markdown link targets first, then bare URLs."""
    urls: list[str] = [url for _, url in markdown_links(text)]
    for match in BARE_URL_RE.finditer(text):
        url = match.group(0).rstrip(".,;!?")
        urls.append(url)
    return list(dict.fromkeys(urls))


def normalize_for_compare(url: str) -> str:
    """Loose form used to match draft links against the URL bank."""
    return url.strip().rstrip("/").lower()


__all__ = [
    "TRACKING_PARAMS",
    "MARKDOWN_LINK_RE",
    "clean_url",
    "extract_source",
    "markdown_links",
    "extract_citations",
    "normalize_for_compare",
]
