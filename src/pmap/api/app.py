"""FastAPI application for the pmap local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..adapters.pmap_parser import parse_pmap
from ..adapters.yaml_codec import document_to_dict
from ..format.inline import process_inline_markup
from ..lint import lint_text


class TextPayload(BaseModel):
    text: str


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)


def create_app(runtime: Any, token: str | None = None) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with library and renderer
        token: Bearer token for authentication (None to disable auth)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="pmap API",
        description="Local JSON API for pmap documents",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    security_scheme = HTTPBearer(auto_error=False)

    async def verify_token(
        credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
    ) -> None:
        """Verify bearer token when auth is enabled."""
        if token is None:
            return None
        if credentials is None or credentials.credentials != token:
            raise HTTPException(status_code=401, detail="Invalid or missing token")
        return None

    def load(doc_id: str) -> Any:
        doc = runtime.library.get(doc_id)
        if doc is None:
            raise HTTPException(status_code=404, detail=f"Document {doc_id} not found")
        return doc

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/documents")
    async def list_documents(auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """List documents with their metadata."""
        out = []
        for doc_id in runtime.library.list_ids():
            doc = runtime.library.get(doc_id)
            if doc is not None:
                out.append({"id": doc_id, "title": doc.title, "description": doc.description})
        return out

    @app.get("/documents/{doc_id}")
    async def get_document(doc_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get the parsed document model."""
        return {"id": doc_id, **document_to_dict(load(doc_id))}

    @app.get("/documents/{doc_id}/html", response_class=HTMLResponse)
    async def get_document_html(doc_id: str, auth: None = Depends(verify_token)) -> str:
        """Render a document as a full HTML page."""
        return runtime.renderer.render_document(load(doc_id))

    @app.post("/parse")
    async def parse(payload: TextPayload, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Parse raw pmap text."""
        return document_to_dict(parse_pmap(payload.text))

    @app.post("/inline")
    async def inline(payload: TextPayload, auth: None = Depends(verify_token)) -> dict[str, str]:
        """Apply inline markup to a text fragment."""
        return {"html": process_inline_markup(payload.text)}

    @app.post("/lint")
    async def lint(payload: TextPayload, auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Lint raw pmap text."""
        return [
            {"severity": f.severity, "message": f.message, "line": f.line}
            for f in lint_text(payload.text)
        ]

    return app
