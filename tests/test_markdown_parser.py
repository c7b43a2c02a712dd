"""Tests for the structural Markdown parser."""

from calledout.adapters.markdown_parser import MarkdownParser
from calledout.core.model import Range

from conftest import SCENARIO


def test_scenario_blocks():
    """Heading then a two-line callout; ranges stop before the newline."""
    blocks = MarkdownParser().parse(SCENARIO)

    assert [b.kind for b in blocks] == ["heading", "callout"]

    callout = blocks[1]
    assert callout.range == Range(8, 41)
    assert callout.start_line == 1
    assert callout.end_line == 2
    assert SCENARIO[callout.range.start:callout.range.end] == ">[!note] Remember this\n>More text"
    assert SCENARIO[callout.range.end] == "\n"
    assert callout.label is None


def test_plain_blockquote_is_not_callout():
    """Quotes without a [! header are ordinary block quotes."""
    blocks = MarkdownParser().parse("> just a quote\n> second line\n")
    assert [b.kind for b in blocks] == ["blockquote"]


def test_spaced_header_still_tagged_callout():
    """The parser tags "> [!note]" as a callout block."""
    blocks = MarkdownParser().parse("> [!note] Spaced\n> body\n")
    assert [b.kind for b in blocks] == ["callout"]


def test_blank_line_separates_callouts():
    """Two callouts separated by a blank line are two blocks."""
    text = ">[!note] One\n>body\n\n>[!tip] Two\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["callout", "callout"]
    assert blocks[0].start_line == 0
    assert blocks[0].end_line == 1
    assert blocks[1].start_line == 3
    assert text[blocks[1].range.start:blocks[1].range.end] == ">[!tip] Two"


def test_callout_label_on_last_line():
    """A trailing >^id line becomes the block label."""
    text = ">[!note] Remember this\n>More text\n>^Remember-this-k3x9\n"
    blocks = MarkdownParser().parse(text)

    assert len(blocks) == 1
    assert blocks[0].label is not None
    assert blocks[0].label.name == "Remember-this-k3x9"


def test_paragraph_and_heading_labels():
    """Labels at the end of paragraphs and headings are picked up."""
    text = "## Section ^sec\n\nSome text\nmore text ^para1\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["heading", "paragraph"]
    assert blocks[0].label.name == "sec"
    assert blocks[1].label.name == "para1"


def test_fence_label_and_contents():
    """Callout-looking lines inside a fence stay inside the fence."""
    text = "```python ^code\n>[!note] Not a callout\n```\n\n>[!note] Real\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["fence", "callout"]
    assert blocks[0].label.name == "code"
    assert blocks[0].fence_info == "python ^code"


def test_unterminated_fence_runs_to_end():
    """A fence without a closing line swallows the rest of the document."""
    text = "```\n>[!note] Hidden\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["fence"]
    assert blocks[0].end_line == 1


def test_frontmatter_block():
    """Leading frontmatter becomes a yaml block and never a callout."""
    text = "---\ntitle: Daily\n---\n>[!note] After\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["yaml", "callout"]
    assert blocks[0].start_line == 0
    assert blocks[0].end_line == 2
    assert blocks[1].start_line == 3
    assert text[blocks[1].range.start:blocks[1].range.end] == ">[!note] After"


def test_list_and_lazy_paragraph():
    """List items group together; a following quote starts a new block."""
    text = "- one\n- two\ncontinued\n>[!todo] Next\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["list", "callout"]
    assert blocks[0].end_line == 2


def test_crlf_offsets():
    """Windows line endings are excluded from block ranges."""
    text = "# T\r\n>[!note] Win\r\n>body\r\n"
    blocks = MarkdownParser().parse(text)

    callout = blocks[1]
    assert text[callout.range.start:callout.range.end] == ">[!note] Win\r\n>body"
    assert text[callout.range.end:callout.range.end + 2] == "\r\n"


def test_empty_document():
    """No text, no blocks."""
    assert MarkdownParser().parse("") == []


def test_only_newline_ends_a_line():
    """Form feeds and Unicode separators stay inside their line."""
    text = "intro\x0cpage two\n>[!note] Here\n"
    blocks = MarkdownParser().parse(text)

    assert [b.kind for b in blocks] == ["paragraph", "callout"]
    assert blocks[0].end_line == 0
    callout = blocks[1]
    assert callout.start_line == text.count("\n", 0, callout.range.start) == 1
    assert text[callout.range.start:callout.range.end] == ">[!note] Here"

    blocks = MarkdownParser().parse("a b\x85c\n\n>[!tip] Next\n")
    assert blocks[-1].start_line == 2
