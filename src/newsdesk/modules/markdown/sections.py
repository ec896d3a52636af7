"""Locate and replace heading-delimited sections by AST line ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .parser import Block, parse_blocks


@dataclass(frozen=True)
class Section:
    heading: Block
    start: int
    end: int
    blocks: tuple[Block, ...]

    @property
    def title(self) -> str:
        return self.heading.plain_text().strip()

    def text(self, markdown: str) -> str:
        return "\n".join(markdown.split("\n")[self.start : self.end])

    def lines(self, markdown: str) -> list[str]:
        return markdown.split("\n")[self.start : self.end]


BoundaryFn = Callable[[Block, Block], bool]


def _same_or_higher_level(heading: Block, candidate: Block) -> bool:
    return candidate.level <= heading.level


def section_at(
    blocks: list[Block],
    heading: Block,
    *,
    total_lines: int,
    is_boundary: BoundaryFn = _same_or_higher_level,
) -> Section:
    """Section from `heading` up to the next heading accepted by `is_boundary`."""
    idx = blocks.index(heading)
    end = total_lines
    body: list[Block] = []
    for block in blocks[idx + 1 :]:
        if block.is_heading and is_boundary(heading, block):
            end = block.start
            break
        body.append(block)
    return Section(heading=heading, start=heading.start, end=end, blocks=tuple(body))


def find_section(
    markdown: str,
    match: Callable[[Block], bool],
    *,
    is_boundary: BoundaryFn = _same_or_higher_level,
    blocks: list[Block] | None = None,
) -> Section | None:
    """First section whose heading satisfies `match`."""
    blocks = blocks if blocks is not None else parse_blocks(markdown)
    total = len(markdown.split("\n"))
    for block in blocks:
        if block.is_heading and match(block):
            return section_at(blocks, block, total_lines=total, is_boundary=is_boundary)
    return None


def replace_lines(markdown: str, start: int, end: int, replacement: str) -> str:
    """Replace source lines [start, end) with `replacement`."""
    lines = markdown.split("\n")
    new_lines = replacement.rstrip("\n").split("\n")
    # Keep one blank separator before the following section
    if end < len(lines) and new_lines and new_lines[-1].strip():
        new_lines.append("")
    return "\n".join(lines[:start] + new_lines + lines[end:])


__all__ = ["Section", "section_at", "find_section", "replace_lines"]
