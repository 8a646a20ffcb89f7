"""
FastAPI server for owner-scoped semantic search.

Callers authenticate with a bearer token mapped to an owner id; every
search and indexing call is scoped to that owner.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .config import SearchConfig, configure_logging, load_config, resolve_db_path
from .embeddings import Embedder, EmbeddingClient
from .errors import AuthenticationError, SearchValidationError, SemanticSearchError
from .indexing import Indexer
from .search import SemanticSearchEngine
from .storage import DuckDBStorage

app = FastAPI(
    title="SemanticSearch",
    description="Owner-scoped semantic search over indexed documents",
)

_bearer = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Pipeline components bound to one request."""

    indexer: Indexer
    search_engine: SemanticSearchEngine


class IndexRequest(BaseModel):
    """Request model for indexing one document."""

    content_type: str
    document_id: str
    fields: list[str] = Field(min_length=1)
    title_field: str = "title"


@lru_cache(maxsize=1)
def get_config() -> SearchConfig:
    """Load settings once; startup fails without an API key."""
    return load_config()


@lru_cache(maxsize=1)
def get_embedder() -> Embedder:
    """One embedding client per process, sharing its connection pool."""
    return EmbeddingClient(get_config())


def get_services(
    config: SearchConfig = Depends(get_config),
    embedder: Embedder = Depends(get_embedder),
) -> Iterator[Services]:
    storage = DuckDBStorage(resolve_db_path(config.db_path))
    try:
        yield Services(
            indexer=Indexer(storage, storage, embedder, config=config),
            search_engine=SemanticSearchEngine(storage, storage, embedder, config=config),
        )
    finally:
        storage.close()


def get_owner_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    config: SearchConfig = Depends(get_config),
) -> int:
    """Map the bearer token to its owner id."""
    if credentials is None or credentials.credentials not in config.api_tokens:
        raise AuthenticationError("You must be logged in to search")
    return config.api_tokens[credentials.credentials]


@app.exception_handler(SemanticSearchError)
async def handle_search_error(request: Request, exc: SemanticSearchError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/search")
async def search(
    owner_id: int = Depends(get_owner_id),
    services: Services = Depends(get_services),
    query: str | None = None,
    content_type: str | None = Query(default=None, alias="contentType"),
    limit: int | None = Query(default=None, ge=1),
    threshold: float | None = None,
):
    """Search the caller's indexed chunks and return ranked documents."""
    if not query or not query.strip():
        raise SearchValidationError("Query param is required")

    results = await services.search_engine.query_search(
        query,
        owner_id=owner_id,
        content_type=content_type,
        limit=limit,
        threshold=threshold,
    )
    return {
        "data": [result.to_dict() for result in results],
        "meta": {"count": len(results)},
    }


@app.post("/api/index")
async def index_document(
    request: IndexRequest,
    owner_id: int = Depends(get_owner_id),
    services: Services = Depends(get_services),
):
    """Index (or re-index) one document for the caller."""
    if len(request.fields) == 1:
        result = await services.indexer.index_document(
            request.content_type,
            request.document_id,
            request.fields[0],
            title_field=request.title_field,
            owner_id=owner_id,
        )
    else:
        result = await services.indexer.index_document_fields(
            request.content_type,
            request.document_id,
            request.fields,
            title_field=request.title_field,
            owner_id=owner_id,
        )
    return asdict(result)


def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn

    config = get_config()
    configure_logging(config.log_level)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run_server()
