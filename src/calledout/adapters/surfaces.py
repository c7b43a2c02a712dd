"""Edit surfaces: where jumps land and where link text goes."""

import json
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, TextIO

from ..core.errors import NoActiveEditTarget
from ..core.model import Cursor, DocId, Splice
from ..core.ports import EditSurface
from ..core.vault import Vault
from .markdown_parser import split_lines


def _clamp(line: int) -> int:
    return max(0, line)


def line_col_to_offset(text: str, cursor: Cursor) -> int:
    """Character offset of a 0-based line/column, clamped to the text."""
    lines = split_lines(text)
    if cursor.line >= len(lines):
        return len(text)
    offset = sum(len(ln) for ln in lines[: _clamp(cursor.line)])
    content = lines[_clamp(cursor.line)].rstrip("\r\n")
    return offset + min(max(0, cursor.ch), len(content))


def offset_to_cursor(text: str, offset: int) -> Cursor:
    line_start = text.rfind("\n", 0, offset) + 1
    return Cursor(text.count("\n", 0, offset), offset - line_start)


class CaptureSurface(EditSurface):
    """Records everything it is asked to do."""

    writable = True

    def __init__(self) -> None:
        self.doc_id: DocId | None = None
        self.cursor = Cursor(0, 0)
        self.scrolled: tuple[Cursor, Cursor] | None = None
        self.inserted: list[str] = []

    def open(self, doc_id: DocId) -> None:
        self.doc_id = doc_id

    def get_cursor(self) -> Cursor:
        return self.cursor

    def set_cursor(self, cursor: Cursor) -> None:
        self.cursor = cursor

    def scroll_into_view(self, start: Cursor, end: Cursor, center: bool = False) -> None:
        self.scrolled = (start, end)

    def insert_at_cursor(self, text: str) -> None:
        self.inserted.append(text)
        self.cursor = Cursor(self.cursor.line, self.cursor.ch + len(text))

    def document_edited(self, doc_id: DocId, splice: Splice, before: str) -> None:
        pass


class StreamSurface(CaptureSurface):
    """
    Prints to a stream: inserted text as-is, revealed ranges as a location
    record (JSON or TSV) the way ``locate`` tools report positions.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        path_of: Callable[[DocId], Path] | None = None,
        format_type: str = "json",
    ):
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout
        self.path_of = path_of
        self.format_type = format_type

    def location(self, start: Cursor, end: Cursor) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.doc_id,
            "cursor": {"line": _clamp(self.cursor.line), "ch": self.cursor.ch},
            "lines": {"start": _clamp(start.line), "end": end.line},
        }
        if self.path_of is not None and self.doc_id is not None:
            result["path"] = str(self.path_of(self.doc_id).absolute())
        return result

    def scroll_into_view(self, start: Cursor, end: Cursor, center: bool = False) -> None:
        super().scroll_into_view(start, end, center)
        loc = self.location(start, end)
        if self.format_type == "tsv":
            fields = [loc["id"], loc.get("path", ""), loc["cursor"]["line"], loc["lines"]["start"], loc["lines"]["end"]]
            print("\t".join(str(f) for f in fields), file=self.stream)
        else:
            print(json.dumps(loc, indent=2), file=self.stream)

    def insert_at_cursor(self, text: str) -> None:
        super().insert_at_cursor(text)
        print(text, file=self.stream)


class DocumentSurface(CaptureSurface):
    """A stored document acting as the active editor, with a cursor in it."""

    def __init__(self, vault: Vault, doc_id: DocId, cursor: Cursor | None = None):
        super().__init__()
        self.vault = vault
        self.doc_id = doc_id
        self.cursor = cursor if cursor is not None else Cursor(0, 0)

    @property  # type: ignore[override]
    def writable(self) -> bool:
        return self.doc_id is not None and self.vault.storage.read_raw(self.doc_id) is not None

    def insert_at_cursor(self, text: str) -> None:
        doc = self.vault.get(self.doc_id) if self.doc_id is not None else None
        if doc is None:
            raise NoActiveEditTarget()
        offset = line_col_to_offset(doc.text, self.cursor)
        self.vault.replace(self.doc_id, doc.text[:offset] + text + doc.text[offset:], expected=doc.text)
        super().insert_at_cursor(text)

    def document_edited(self, doc_id: DocId, splice: Splice, before: str) -> None:
        """Keep the cursor on the same text when an edit lands above it."""
        if doc_id != self.doc_id:
            return
        offset = line_col_to_offset(before, self.cursor)
        # an edit exactly at the cursor stays after it
        if splice.offset < offset:
            self.cursor = offset_to_cursor(splice.apply(before), offset + len(splice.text))


class EditorSurface(CaptureSurface):
    """
    Opens ``$EDITOR +<line> <path>`` once the jump range is revealed.

    Editors take 1-based line numbers. Cannot receive inserted text.
    """

    writable = False

    def __init__(
        self,
        path_of: Callable[[DocId], Path],
        command: str | None = None,
        runner: Callable[..., Any] = subprocess.run,
    ):
        super().__init__()
        self.path_of = path_of
        self.command = command or os.environ.get("EDITOR", "vi")
        self.runner = runner

    def scroll_into_view(self, start: Cursor, end: Cursor, center: bool = False) -> None:
        super().scroll_into_view(start, end, center)
        if self.doc_id is None:
            return
        argv = [*shlex.split(self.command), f"+{_clamp(self.cursor.line) + 1}", str(self.path_of(self.doc_id))]
        self.runner(argv)

    def insert_at_cursor(self, text: str) -> None:
        raise NoActiveEditTarget()
