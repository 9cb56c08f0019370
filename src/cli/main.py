"""DocChunk CLI entry point."""

import typer

from src.cli.chunk import chunk
from src.cli.search import search

app = typer.Typer(
    name="docchunk",
    help="DocChunk - Split documents into semantic or agentic chunks with embeddings.",
)

app.command(name="chunk")(chunk)
app.command(name="search")(search)


if __name__ == "__main__":
    app()
