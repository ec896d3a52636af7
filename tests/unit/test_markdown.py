"""Markdown AST helpers: blocks, sections, word counts and document layout."""

from __future__ import annotations

import pytest

# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParseBlocks:
    def test_blocks_keep_source_lines(self):
        from newsdesk.modules.markdown import parse_blocks

        blocks = parse_blocks("# Title\n\nFirst paragraph.\n\n- one\n- two\n")

        assert [(b.kind, b.start, b.end) for b in blocks] == [
            ("heading", 0, 1),
            ("paragraph", 2, 3),
            ("list_item", 4, 5),
            ("list_item", 5, 6),
        ]
        assert blocks[0].level == 1

    def test_plain_text_keeps_anchor_text(self):
        from newsdesk.modules.markdown import parse_blocks

        block = parse_blocks("Read **the** [launch post](https://a.example.com/x) now.")[0]

        assert block.plain_text() == "Read the launch post now."
        assert [(link.text, link.url) for link in block.links()] == [
            ("launch post", "https://a.example.com/x")
        ]

    def test_word_count_ignores_emoji_and_syntax(self):
        from newsdesk.modules.markdown import parse_blocks, word_count

        blocks = parse_blocks("# 🚀 Big Launch\n\n**Three** [little words](https://a.example.com) 🎉 - here.")

        # Big Launch + Three little words here
        assert word_count(blocks) == 6

    def test_fence_has_no_plain_text(self):
        from newsdesk.modules.markdown import parse_blocks

        block = parse_blocks("```\ncode here\n```")[0]

        assert block.kind == "fence"
        assert block.plain_text() == ""


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


DOC = "# One\n\nAlpha.\n\n## Sub\n\nBeta.\n\n# Two\n\nGamma.\n"


class TestSections:
    def test_find_section_stops_at_same_level(self):
        from newsdesk.modules.markdown import find_section

        section = find_section(DOC, lambda b: b.plain_text() == "One")

        assert section.title == "One"
        assert section.text(DOC) == "# One\n\nAlpha.\n\n## Sub\n\nBeta.\n"
        assert [b.kind for b in section.blocks] == ["paragraph", "heading", "paragraph"]

    def test_custom_boundary(self):
        from newsdesk.modules.markdown import find_section

        section = find_section(
            DOC, lambda b: b.plain_text() == "One", is_boundary=lambda heading, candidate: True
        )

        assert section.lines(DOC) == ["# One", "", "Alpha.", ""]

    def test_missing_section(self):
        from newsdesk.modules.markdown import find_section

        assert find_section(DOC, lambda b: b.plain_text() == "Three") is None

    def test_replace_lines_keeps_separator(self):
        from newsdesk.modules.markdown import find_section, replace_lines

        section = find_section(DOC, lambda b: b.plain_text() == "One")

        result = replace_lines(DOC, section.start, section.end, "# One\n\nShorter.")

        assert result == "# One\n\nShorter.\n\n# Two\n\nGamma.\n"

    def test_last_section_runs_to_end(self):
        from newsdesk.modules.markdown import find_section

        section = find_section(DOC, lambda b: b.plain_text() == "Two")

        assert section.end == len(DOC.split("\n"))


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


class TestTextHelpers:
    @pytest.mark.parametrize(
        "line,expected",
        [("🦴 Scoop", True), ("- 🎨 Bullet", True), ("Body 🎉", False), ("Plain", False)],
    )
    def test_starts_with_emoji(self, line, expected):
        from newsdesk.modules.markdown import starts_with_emoji

        assert starts_with_emoji(line) is expected

    def test_strip_code_fence(self):
        from newsdesk.modules.markdown import strip_code_fence

        assert strip_code_fence("```markdown\n# Title\n```") == "# Title"
        assert strip_code_fence("```\n# Title\n```\n") == "# Title"
        assert strip_code_fence("  # Title  ") == "# Title"

    def test_strip_code_fence_leaves_inner_fences(self):
        from newsdesk.modules.markdown import strip_code_fence

        text = "# Title\n\n```python\nprint(1)\n```"

        assert strip_code_fence(text) == text

    def test_count_words_skips_punctuation_tokens(self):
        from newsdesk.modules.markdown import count_words

        assert count_words("Hello - world , again") == 3


# ---------------------------------------------------------------------------
# Document layout
# ---------------------------------------------------------------------------


class TestRenderDocument:
    def test_text_and_ranges(self):
        from newsdesk.modules.markdown import render_document

        layout = render_document("# Title\n\nSome **bold** and [a link](https://a.example.com).\n\n- item\n")

        assert layout.text == "Title\nSome bold and a link.\nitem\n"
        heading = layout.of_kind("heading")[0]
        assert (heading.start, heading.end, heading.level) == (0, 5, 1)
        bold = layout.of_kind("bold")[0]
        assert layout.text[bold.start : bold.end] == "bold"
        link = layout.of_kind("link")[0]
        assert layout.text[link.start : link.end] == "a link"
        assert link.url == "https://a.example.com"
        bullet = layout.of_kind("bullet")[0]
        assert layout.text[bullet.start : bullet.end] == "item"

    def test_offsets_are_utf16_units(self):
        from newsdesk.modules.markdown import render_document
        from newsdesk.modules.markdown.formatting import utf16_len

        layout = render_document("# 🚀 Launch\n\n**Bold**")

        bold = layout.of_kind("bold")[0]
        # The rocket is a surrogate pair: two UTF-16 units
        assert utf16_len("🚀") == 2
        assert bold.start == utf16_len("🚀 Launch\n")
        assert bold.end - bold.start == 4
