"""Tests for jump targets and edit surfaces."""

import io
import json

from calledout.adapters.surfaces import (
    CaptureSurface,
    DocumentSurface,
    EditorSurface,
    StreamSurface,
    line_col_to_offset,
    offset_to_cursor,
)
from calledout.core.model import Block, Callout, Cursor, Range
from calledout.core.navigator import jump, jump_target


def _callout(start_line: int, end_line: int) -> Callout:
    return Callout(
        doc_id="notes",
        type="note",
        title="Remember this",
        block=Block(kind="callout", range=Range(0, 1), start_line=start_line, end_line=end_line),
    )


def test_jump_target_lines():
    """Cursor one line above the block; scroll range pads both ends."""
    target = jump_target(_callout(1, 2))

    assert target.doc_id == "notes"
    assert target.cursor == Cursor(0, 0)
    assert target.scroll_from == Cursor(0, 0)
    assert target.scroll_to == Cursor(3, 0)


def test_jump_drives_surface():
    """Jumping opens the document, places the cursor and scrolls."""
    surface = CaptureSurface()
    jump(_callout(5, 9), surface)

    assert surface.doc_id == "notes"
    assert surface.cursor == Cursor(4, 0)
    assert surface.scrolled == (Cursor(4, 0), Cursor(10, 0))


def test_stream_surface_prints_location(tmp_path):
    """The stream surface reports where the jump landed."""
    out = io.StringIO()
    surface = StreamSurface(stream=out, path_of=lambda doc_id: tmp_path / f"{doc_id}.md")
    jump(_callout(0, 1), surface)

    data = json.loads(out.getvalue())
    assert data["id"] == "notes"
    assert data["cursor"] == {"line": 0, "ch": 0}  # clamped from -1
    assert data["lines"] == {"start": 0, "end": 2}
    assert data["path"].endswith("notes.md")


def test_stream_surface_tsv():
    """TSV output is one tab-separated line."""
    out = io.StringIO()
    jump(_callout(3, 4), StreamSurface(stream=out, format_type="tsv"))
    assert out.getvalue() == "notes\t\t2\t2\t5\n"


def test_editor_surface_runs_editor(tmp_path):
    """Editors get a 1-based +line argument and the file path."""
    calls = []
    surface = EditorSurface(lambda doc_id: tmp_path / f"{doc_id}.md", command="nvim -R", runner=calls.append)
    jump(_callout(7, 8), surface)

    assert calls == [["nvim", "-R", "+7", str(tmp_path / "notes.md")]]
    assert surface.writable is False


def test_line_col_to_offset():
    """Line/column positions clamp to the text."""
    text = "ab\ncde\n"
    assert line_col_to_offset(text, Cursor(0, 0)) == 0
    assert line_col_to_offset(text, Cursor(1, 2)) == 5
    assert line_col_to_offset(text, Cursor(1, 99)) == 6
    assert line_col_to_offset(text, Cursor(9, 0)) == len(text)


def test_document_surface_inserts_text(vault, vault_root):
    """A document surface splices text in at its cursor."""
    (vault_root / "target.md").write_text("See: \nEnd\n")
    surface = DocumentSurface(vault, "target", Cursor(0, 5))

    assert surface.writable
    surface.insert_at_cursor("[[notes#^a|A]]")

    assert (vault_root / "target.md").read_text() == "See: [[notes#^a|A]]\nEnd\n"
    assert surface.cursor == Cursor(0, 19)


def test_document_surface_missing_document(vault):
    """A surface on a missing document cannot receive text."""
    assert not DocumentSurface(vault, "nowhere").writable


def test_line_col_to_offset_ignores_form_feed():
    """Lines are counted by newlines only."""
    text = "intro\x0cpage\nnext\n"
    assert line_col_to_offset(text, Cursor(1, 0)) == text.index("next")
    assert offset_to_cursor(text, text.index("next") + 2) == Cursor(1, 2)
    assert offset_to_cursor(text, 0) == Cursor(0, 0)
