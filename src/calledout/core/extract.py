"""Extract typed, titled callouts from a document's callout blocks."""

import re
from collections.abc import Iterable

from .model import CALLOUT_KIND, Block, Callout, DocId, Document

# ">[!type] title" on one line; type runs up to the first "]".
CALLOUT_HEADER_RE = re.compile(r"^>\[!([^\]\n]*)\](.*)$", re.MULTILINE)


def parse_header(block_text: str) -> tuple[str, str] | None:
    """
    Return the trimmed (type, title) of the first header line in a block.

    None when no line matches or the title is empty after trimming.
    """
    m = CALLOUT_HEADER_RE.search(block_text)
    if not m:
        return None
    title = m.group(2).strip()
    if not title:
        return None
    return m.group(1).strip(), title


def extract_callouts(doc_id: DocId, text: str, blocks: Iterable[Block]) -> list[Callout]:
    """
    Build callouts from the blocks tagged as callouts, in block order.

    Blocks are trusted as given; offsets index into ``text``.
    """
    callouts: list[Callout] = []
    for block in blocks:
        if block.kind != CALLOUT_KIND:
            continue
        header = parse_header(text[block.range.start : block.range.end])
        if header is None:
            continue
        type_, title = header
        callouts.append(
            Callout(
                doc_id=doc_id,
                type=type_,
                title=title,
                block=block,
                anchor_id=block.label.name if block.label else None,
            )
        )
    return callouts


def extract_document(doc: Document) -> list[Callout]:
    return extract_callouts(doc.id, doc.text, doc.blocks)
