"""Block-level markdown AST built on markdown-it-py.

Every block keeps the source line range it was parsed from, so callers can
locate, count and replace content by node range instead of by string offsets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .text import count_words, strip_emoji

_md = MarkdownIt("commonmark")


@dataclass(frozen=True)
class Link:
    text: str
    url: str
    line: int


@dataclass(frozen=True)
class Block:
    """One leaf block: heading, paragraph, list item paragraph, fence, hr or html."""

    kind: str
    start: int
    end: int
    level: int = 0
    source: str = ""
    children: tuple[Token, ...] = field(default=(), compare=False, repr=False)

    @property
    def is_heading(self) -> bool:
        return self.kind == "heading"

    def plain_text(self) -> str:
        """Text with markdown syntax removed; link anchors are kept."""
        if self.kind in ("fence", "hr", "html"):
            return ""
        return inline_plain_text(self.children)

    def links(self) -> list[Link]:
        return list(_iter_links(self.children, self.start))


def inline_plain_text(children: tuple[Token, ...] | list[Token]) -> str:
    parts: list[str] = []
    for tok in children:
        if tok.type in ("text", "code_inline"):
            parts.append(tok.content)
        elif tok.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif tok.type == "image":
            parts.append(inline_plain_text(tok.children or []))
    return "".join(parts)


def _iter_links(children: tuple[Token, ...], line: int) -> Iterator[Link]:
    href: str | None = None
    anchor: list[str] = []
    for tok in children:
        if tok.type == "link_open":
            href = str(tok.attrGet("href") or "")
            anchor = []
        elif tok.type == "link_close" and href is not None:
            yield Link(text="".join(anchor), url=href, line=line)
            href = None
        elif href is not None and tok.type in ("text", "code_inline"):
            anchor.append(tok.content)


def parse_blocks(markdown: str) -> list[Block]:
    """Parse markdown into leaf blocks in document order."""
    tokens = _md.parse(markdown)
    blocks: list[Block] = []
    list_depth = 0
    pending: Token | None = None

    for tok in tokens:
        if tok.type == "list_item_open":
            list_depth += 1
        elif tok.type == "list_item_close":
            list_depth -= 1
        elif tok.type in ("heading_open", "paragraph_open"):
            pending = tok
        elif tok.type == "inline" and pending is not None:
            start, end = pending.map or (0, 0)
            if pending.type == "heading_open":
                blocks.append(
                    Block(
                        kind="heading",
                        start=start,
                        end=end,
                        level=int(pending.tag[1:]),
                        source=tok.content,
                        children=tuple(tok.children or ()),
                    )
                )
            else:
                blocks.append(
                    Block(
                        kind="list_item" if list_depth else "paragraph",
                        start=start,
                        end=end,
                        source=tok.content,
                        children=tuple(tok.children or ()),
                    )
                )
            pending = None
        elif tok.type in ("fence", "code_block", "hr", "html_block"):
            start, end = tok.map or (0, 0)
            kind = {"code_block": "fence", "html_block": "html"}.get(tok.type, tok.type)
            blocks.append(Block(kind=kind, start=start, end=end, source=tok.content))

    return blocks


def headings(blocks: list[Block]) -> list[Block]:
    return [b for b in blocks if b.is_heading]


def all_links(markdown: str) -> list[Link]:
    return [link for block in parse_blocks(markdown) for link in block.links()]


def word_count(blocks: list[Block]) -> int:
    """Words across blocks after stripping markdown syntax and emoji.

    Heading blocks count their text like any other block; only the `#` markers go.
    """
    return sum(count_words(strip_emoji(b.plain_text())) for b in blocks)


__all__ = [
    "Link",
    "Block",
    "parse_blocks",
    "headings",
    "all_links",
    "inline_plain_text",
    "word_count",
]
