"""
Build the callout index for a whole vault.

Reads go through a thread executor so the event loop only waits at store
boundaries; parsing and extraction for one document run on the text of that
single read.
"""

import asyncio
import logging
from typing import Any, Callable

from .extract import extract_document
from .model import Callout, DocId
from .vault import Vault

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


def run_in_thread(func: Callable[..., Any], *args: Any, **kwargs: Any) -> "asyncio.Future[Any]":
    loop = asyncio.get_running_loop()
    return loop.run_in_executor(None, lambda: func(*args, **kwargs))


async def build_index(vault: Vault, concurrency: int = DEFAULT_CONCURRENCY) -> list[Callout]:
    """Every callout in the vault, grouped by document in document-id order."""
    ids: list[DocId] = await run_in_thread(lambda: list(vault.list_ids()))
    sem = asyncio.Semaphore(max(1, concurrency))

    async def one(doc_id: DocId) -> list[Callout]:
        async with sem:
            doc = await run_in_thread(vault.get, doc_id)
        if doc is None:
            # removed between listing and reading
            logger.debug("Skipping vanished document %s", doc_id)
            return []
        return extract_document(doc)

    per_doc = await asyncio.gather(*(one(doc_id) for doc_id in ids))
    callouts = [c for group in per_doc for c in group]
    logger.debug("Indexed %d callouts from %d documents", len(callouts), len(ids))
    return callouts


def collect_callouts(vault: Vault, concurrency: int = DEFAULT_CONCURRENCY) -> list[Callout]:
    """Synchronous entry point for callers without an event loop."""
    return asyncio.run(build_index(vault, concurrency=concurrency))
