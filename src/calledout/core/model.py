from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

DocId = str

CALLOUT_KIND = "callout"


@dataclass(frozen=True)
class BlockLabel:
    name: str  # e.g. "Remember-this-k3x9" for "^Remember-this-k3x9"


@dataclass(frozen=True)
class Range:
    start: int  # character offsets into the full document text
    end: int


@dataclass(frozen=True)
class Block:
    kind: str  # "callout" | "blockquote" | "heading" | "fence" | "list" | "paragraph" | "yaml"
    range: Range
    start_line: int  # 0-based, inclusive
    end_line: int
    label: BlockLabel | None = None
    fence_info: str | None = None


@dataclass(frozen=True)
class Document:
    """One self-consistent snapshot: blocks are always parsed from this text."""

    id: DocId
    text: str
    blocks: tuple[Block, ...] = ()
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str | None:
        value = self.meta.get("title")
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class Callout:
    doc_id: DocId
    type: str
    title: str
    block: Block
    anchor_id: str | None = None

    @property
    def key(self) -> str:
        """Stable handle used by the CLI and API: ``doc_id:start_line``."""
        return f"{self.doc_id}:{self.block.start_line}"


@dataclass(frozen=True)
class MatchResult:
    callout: Callout
    score: tuple[int, ...]  # higher is better; compare as a tuple
    positions: tuple[int, ...] = ()  # matched character indexes in the title


@dataclass(frozen=True)
class Splice:
    offset: int
    text: str

    def apply(self, snapshot: str) -> str:
        return snapshot[: self.offset] + self.text + snapshot[self.offset :]


@dataclass(frozen=True)
class LinkPlan:
    anchor_id: str
    link_text: str
    mutation: Splice | None = None


@dataclass(frozen=True)
class Cursor:
    line: int
    ch: int = 0


@dataclass(frozen=True)
class JumpTarget:
    doc_id: DocId
    cursor: Cursor
    scroll_from: Cursor
    scroll_to: Cursor
