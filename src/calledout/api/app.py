"""FastAPI application for the calledout local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .. import __version__
from ..adapters.surfaces import CaptureSurface
from ..core.errors import DocumentNotFound, StaleDocumentError
from ..core.extract import extract_document
from ..core.indexer import build_index, run_in_thread
from ..core.matcher import rank
from ..core.model import Callout
from ..core.navigator import jump_target
from ..render import jump_to_dict, match_to_dict


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with vault and linker
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="calledout API",
        description="Local JSON API for named callouts",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    async def find_callout(doc_id: str, line: int) -> Callout:
        doc = await run_in_thread(runtime.vault.get, doc_id)
        if doc is None:
            raise HTTPException(status_code=404, detail=f"Document {doc_id} not found")
        for callout in extract_document(doc):
            if callout.block.start_line == line:
                return callout
        raise HTTPException(status_code=404, detail=f"No named callout at {doc_id}:{line}")

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/callouts")
    async def callouts(
        q: str = Query("", description="Fuzzy query over callout titles"),
        limit: int | None = Query(None, ge=1, description="Maximum results"),
        kind: str | None = Query(None, alias="type", description="Only callouts of this type"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Ranked callouts for a query; all of them (up to limit) when empty."""
        items = await build_index(runtime.vault)
        if kind:
            items = [c for c in items if c.type.lower() == kind.lower()]
        n = limit if limit is not None else runtime.config.search.limit
        results = rank(items, q)[:n]
        return {"query": q, "results": [match_to_dict(r) for r in results]}

    @app.get("/jump")
    async def jump(
        doc_id: str = Query(..., description="Document ID"),
        line: int = Query(..., description="0-based start line of the callout"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Cursor and scroll range for a callout."""
        callout = await find_callout(doc_id, line)
        return jump_to_dict(jump_target(callout))

    @app.post("/link")
    async def link(
        doc_id: str = Query(..., description="Document ID"),
        line: int = Query(..., description="0-based start line of the callout"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Anchor the callout if needed and return link text pointing at it."""
        callout = await find_callout(doc_id, line)
        surface = CaptureSurface()
        try:
            plan = await run_in_thread(runtime.linker.link, callout, surface)
        except StaleDocumentError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except DocumentNotFound as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return {
            "anchor": plan.anchor_id,
            "link": plan.link_text,
            "created": plan.mutation is not None,
        }

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
