import asyncio
import json
from pathlib import Path
from typing import Annotated, List, Optional

from rich.console import Console
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .config import SearchConfig, configure_logging, load_config, resolve_db_path
from .embeddings import EmbeddingClient
from .errors import SemanticSearchError
from .indexing import Indexer
from .search import SemanticSearchEngine
from .storage import DuckDBStorage

app = Typer(help="Owner-scoped semantic search over indexed documents.")
console = Console()

DbPathOption = Annotated[
    Optional[str],
    Option("--db-path", help="DuckDB file (defaults to SEMANTIC_SEARCH_DB_PATH)."),
]


@app.callback()
def main(
    log_level: Annotated[
        Optional[str], Option("--log-level", help="Override SEMANTIC_SEARCH_LOG_LEVEL.")
    ] = None,
) -> None:
    configure_logging(log_level or _env_config().log_level)


def _open_storage(config: SearchConfig, db_path: str | None) -> DuckDBStorage:
    return DuckDBStorage(resolve_db_path(db_path or config.db_path))


def _fail(exc: SemanticSearchError) -> Exit:
    console.print(f"[bold red]Error:[/] {exc.message}")
    return Exit(code=1)


def _env_config() -> SearchConfig:
    try:
        return SearchConfig.from_env()
    except SemanticSearchError as exc:
        raise _fail(exc) from exc


@app.command("add-document")
def add_document(
    content_type: Annotated[str, Option("--type", "-t", help="Content type of the document.")],
    document_id: Annotated[str, Option("--id", help="Document identifier.")],
    file: Annotated[Path, Option("--file", "-f", help="JSON object with the document fields.")],
    db_path: DbPathOption = None,
) -> None:
    """Store or replace a document in the document table."""
    fields = json.loads(file.read_text())
    if not isinstance(fields, dict):
        console.print("[bold red]Error:[/] document file must contain a JSON object")
        raise Exit(code=1)

    with _open_storage(_env_config(), db_path) as storage:
        storage.put_document(content_type, document_id, fields)
    console.print(f"Stored [bold]{content_type}:{document_id}[/]")


@app.command()
def index(
    content_type: Annotated[str, Option("--type", "-t", help="Content type of the document.")],
    document_id: Annotated[str, Option("--id", help="Document identifier.")],
    owner: Annotated[int, Option("--owner", help="Owner id the chunks belong to.")],
    field: Annotated[
        List[str], Option("--field", help="Field(s) to index; repeat for several.")
    ] = ["content"],
    title_field: Annotated[str, Option("--title-field", help="Field used as title.")] = "title",
    db_path: DbPathOption = None,
) -> None:
    """Chunk, embed and store one document for an owner."""
    try:
        config = load_config()
        with _open_storage(config, db_path) as storage:
            indexer = Indexer(storage, storage, EmbeddingClient(config), config=config)
            if len(field) == 1:
                coro = indexer.index_document(
                    content_type, document_id, field[0],
                    title_field=title_field, owner_id=owner,
                )
            else:
                coro = indexer.index_document_fields(
                    content_type, document_id, field,
                    title_field=title_field, owner_id=owner,
                )
            result = asyncio.run(coro)
    except SemanticSearchError as exc:
        raise _fail(exc) from exc

    console.print(
        f"Indexed [bold]{result.chunks_created}[/] chunks for "
        f"{result.content_type}:{result.document_id}"
    )


@app.command()
def remove(
    document_id: Annotated[str, Option("--id", help="Document identifier.")],
    db_path: DbPathOption = None,
) -> None:
    """Remove every chunk of a document from the index."""
    config = _env_config()
    with _open_storage(config, db_path) as storage:
        result = Indexer(storage, storage, config=config).remove_document(
            document_id
        )
    console.print(f"Removed [bold]{result.chunks_removed}[/] chunks for {document_id}")


@app.command()
def search(
    query: Annotated[str, Argument(help="Free-text query.")],
    owner: Annotated[int, Option("--owner", help="Owner id to search as.")],
    content_type: Annotated[
        Optional[str], Option("--type", "-t", help="Restrict to one content type.")
    ] = None,
    limit: Annotated[int, Option("--limit", "-n", min=1, help="Maximum documents.")] = 5,
    threshold: Annotated[
        Optional[float], Option("--threshold", help="Similarity threshold override.")
    ] = None,
    db_path: DbPathOption = None,
) -> None:
    """Search an owner's indexed documents."""
    try:
        config = load_config()
        with _open_storage(config, db_path) as storage:
            engine = SemanticSearchEngine(
                storage, storage, EmbeddingClient(config), config=config
            )
            results = asyncio.run(
                engine.query_search(
                    query,
                    owner_id=owner,
                    content_type=content_type,
                    limit=limit,
                    threshold=threshold,
                )
            )
    except SemanticSearchError as exc:
        raise _fail(exc) from exc

    if not results:
        console.print("[yellow]No matching documents.[/]")
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("Score", justify="right")
    table.add_column("Document")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Snippet", overflow="fold")
    for result in results:
        table.add_row(
            f"{result.score:.3f}",
            result.document_id,
            result.content_type,
            result.title or "",
            result.text_snippet[:160],
        )
    console.print(table)


@app.command()
def serve(
    host: Annotated[str, Option("--host", help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, Option("--port", help="Port to listen on.")] = 8000,
) -> None:
    """Run the HTTP search API."""
    from .server import run_server

    try:
        run_server(host=host, port=port)
    except SemanticSearchError as exc:
        raise _fail(exc) from exc
