"""Stable block anchors for callouts, and the link text that points at them."""

import logging

from .errors import DocumentNotFound, NoActiveEditTarget, StaleDocumentError
from .extract import extract_document
from .model import Callout, Document, LinkPlan, Splice
from .ports import AnchorIdGenerator, EditSurface, LinkFormatter
from .vault import Vault

logger = logging.getLogger(__name__)

# Continues the callout's block quote onto a new line.
SPACER = "\n>"
CRLF_SPACER = "\r\n>"
BLOCK_REF_MARKER = "^"


def spacer_for(snapshot: str, offset: int) -> str:
    """The spacer in the document's own line ending."""
    if snapshot.startswith("\r\n", offset):
        return CRLF_SPACER
    if snapshot.startswith("\n", offset):
        return SPACER
    # block at the end of a document without a final newline
    return CRLF_SPACER if "\r\n" in snapshot else SPACER


class AnchorLinker:
    """Pure planning: never reads or writes documents."""

    def __init__(self, idgen: AnchorIdGenerator, formatter: LinkFormatter):
        self.idgen = idgen
        self.formatter = formatter

    def link_text(self, callout: Callout, anchor_id: str) -> str:
        return self.formatter.format(callout.doc_id, anchor_id, callout.title)

    def plan(self, callout: Callout, snapshot: str) -> LinkPlan:
        """
        Reuse the callout's anchor, or mint one and describe where it goes.

        The splice offset is only valid for ``snapshot``.
        """
        if callout.anchor_id:
            return LinkPlan(
                anchor_id=callout.anchor_id,
                link_text=self.link_text(callout, callout.anchor_id),
            )

        offset = callout.block.range.end
        if offset > len(snapshot):
            raise StaleDocumentError(callout.doc_id, "block ends past the end of the document")

        anchor_id = self.idgen.new_id(callout.title)
        return LinkPlan(
            anchor_id=anchor_id,
            link_text=self.link_text(callout, anchor_id),
            mutation=Splice(
                offset=offset, text=spacer_for(snapshot, offset) + BLOCK_REF_MARKER + anchor_id
            ),
        )


def relocate(callout: Callout, doc: Document) -> Callout:
    """
    Find ``callout`` again in a fresher snapshot of its document.

    Same type and title; the nearest start line wins, then document order.
    """
    candidates = [
        c for c in extract_document(doc) if c.type == callout.type and c.title == callout.title
    ]
    if not candidates:
        raise StaleDocumentError(doc.id, f"callout '{callout.title}' is no longer there")
    return min(candidates, key=lambda c: abs(c.block.start_line - callout.block.start_line))


class CalloutLinker:
    """Link workflow against a vault: re-read, plan, conditional write, deliver."""

    def __init__(self, vault: Vault, linker: AnchorLinker):
        self.vault = vault
        self.linker = linker

    def link(self, callout: Callout, surface: EditSurface | None) -> LinkPlan:
        if surface is None or not surface.writable:
            raise NoActiveEditTarget()

        doc = self.vault.get(callout.doc_id)
        if doc is None:
            raise DocumentNotFound(callout.doc_id)

        current = relocate(callout, doc)
        plan = self.linker.plan(current, doc.text)

        if plan.mutation is not None:
            self.vault.replace(doc.id, plan.mutation.apply(doc.text), expected=doc.text)
            surface.document_edited(doc.id, plan.mutation, doc.text)
            logger.info("Anchored %s as ^%s", current.key, plan.anchor_id)
        else:
            logger.debug("Reusing ^%s for %s", plan.anchor_id, current.key)

        surface.insert_at_cursor(plan.link_text)
        return plan
