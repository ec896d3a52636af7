"""Markdown AST utilities (markdown-it-py): blocks, sections, words, document layout."""

from __future__ import annotations

from .formatting import DocumentLayout, FormatRange, render_document
from .parser import Block, Link, all_links, headings, parse_blocks, word_count
from .sections import Section, find_section, replace_lines, section_at
from .text import contains_emoji, count_words, starts_with_emoji, strip_code_fence, strip_emoji

__all__ = [
    "Block",
    "Link",
    "parse_blocks",
    "headings",
    "all_links",
    "word_count",
    "Section",
    "find_section",
    "section_at",
    "replace_lines",
    "DocumentLayout",
    "FormatRange",
    "render_document",
    "contains_emoji",
    "count_words",
    "starts_with_emoji",
    "strip_emoji",
    "strip_code_fence",
]
