from typing import Protocol, Iterable, Any, Sequence, TypeVar
from .model import DocId, Block, Cursor, Splice

T = TypeVar("T")


class StorageStrategy(Protocol):
    """
    Tree store: a root directory, documents named <id>.md where the id may
    contain "/" for subfolders.
    """

    def read_raw(self, id: DocId) -> str | None:
        pass

    def write_raw(self, id: DocId, contents: str, expected: str | None = None) -> None:
        """Replace the whole document. With ``expected``, only if unchanged."""
        pass

    def list_all_ids(self) -> Iterable[DocId]:
        pass


class ParserStrategy(Protocol):
    """
    Split raw Markdown into block-level spans; MUST NOT require any schema.
    """

    def parse(self, text: str) -> list[Block]:
        pass


class FrontmatterCodec(Protocol):
    """
    Locate and decode optional frontmatter without enforcing schema.
    """

    def split(self, text: str) -> tuple[dict[str, Any], int]:
        """Return (metadata, offset where the body starts)."""
        pass


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T:
        pass


class AnchorIdGenerator(Protocol):
    def new_id(self, title: str) -> str:
        pass


class LinkFormatter(Protocol):
    def format(self, doc_id: DocId, anchor: str | None, display: str) -> str:
        pass


class EditSurface(Protocol):
    """
    Where a jump lands and where link text is delivered. The core computes
    positions and text; surfaces do the side effects.
    """

    writable: bool  # False when inserted text has nowhere to go

    def open(self, doc_id: DocId) -> None:
        pass

    def get_cursor(self) -> Cursor:
        pass

    def set_cursor(self, cursor: Cursor) -> None:
        pass

    def scroll_into_view(self, start: Cursor, end: Cursor, center: bool = False) -> None:
        pass

    def insert_at_cursor(self, text: str) -> None:
        pass

    def document_edited(self, doc_id: DocId, splice: Splice, before: str) -> None:
        """``splice`` was applied to ``before``; move the cursor along if it moved."""
        pass
