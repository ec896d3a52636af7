"""Render markdown into plain document text plus range-based formatting.

Ranges are computed while the text is emitted, from AST node boundaries, and
measured in UTF-16 code units (the unit document APIs index by).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from markdown_it.token import Token

from .parser import Block, parse_blocks

FormatKind = Literal["heading", "bold", "italic", "link", "bullet"]


def utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class FormatRange:
    kind: FormatKind
    start: int
    end: int
    level: int | None = None
    url: str | None = None


@dataclass
class DocumentLayout:
    text: str = ""
    ranges: list[FormatRange] = field(default_factory=list)

    def of_kind(self, kind: FormatKind) -> list[FormatRange]:
        return [r for r in self.ranges if r.kind == kind]


class _Writer:
    def __init__(self) -> None:
        self.parts: list[str] = []
        self.offset = 0
        self.ranges: list[FormatRange] = []

    def write(self, text: str) -> None:
        self.parts.append(text)
        self.offset += utf16_len(text)

    def inline(self, children: tuple[Token, ...]) -> None:
        open_marks: list[tuple[str, int, str | None]] = []
        for tok in children:
            if tok.type in ("text", "code_inline"):
                self.write(tok.content)
            elif tok.type in ("softbreak", "hardbreak"):
                self.write("\n")
            elif tok.type in ("strong_open", "em_open"):
                open_marks.append((tok.type, self.offset, None))
            elif tok.type == "link_open":
                open_marks.append((tok.type, self.offset, str(tok.attrGet("href") or "")))
            elif tok.type in ("strong_close", "em_close", "link_close") and open_marks:
                kind, start, url = open_marks.pop()
                if self.offset <= start:
                    continue
                if kind == "strong_open":
                    self.ranges.append(FormatRange("bold", start, self.offset))
                elif kind == "em_open":
                    self.ranges.append(FormatRange("italic", start, self.offset))
                else:
                    self.ranges.append(FormatRange("link", start, self.offset, url=url))


def render_document(markdown: str) -> DocumentLayout:
    """Plain text (one paragraph per block) plus heading/bold/link/bullet ranges."""
    writer = _Writer()
    blocks: list[Block] = parse_blocks(markdown)

    for block in blocks:
        start = writer.offset
        if block.kind in ("heading", "paragraph", "list_item"):
            writer.inline(block.children)
        elif block.kind == "fence":
            writer.write(block.source.rstrip("\n"))
        else:
            continue

        end = writer.offset
        writer.write("\n")
        if block.kind == "heading" and end > start:
            writer.ranges.append(FormatRange("heading", start, end, level=block.level))
        elif block.kind == "list_item" and end > start:
            writer.ranges.append(FormatRange("bullet", start, end))

    return DocumentLayout(text="".join(writer.parts), ranges=writer.ranges)


__all__ = ["FormatKind", "FormatRange", "DocumentLayout", "render_document", "utf16_len"]
