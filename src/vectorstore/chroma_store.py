"""ChromaDB vector store for semantic and agentic chunks."""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from src.models.chunk import AgenticChunk, Chunk, SemanticChunk
from src.models.enums import ChunkingStrategy

logger = logging.getLogger(__name__)

COLLECTION_NAME = "document_chunks"


class ChromaStore:
    """ChromaDB-backed store for document chunks.

    Manages a single collection ('document_chunks') with cosine distance.
    Each row carries the parent document id and the chunking strategy that
    produced it, so queries can be filtered by either.
    """

    def __init__(self, path: str = "./data/chroma"):
        if path == ":memory:":
            self._client = chromadb.Client()
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collection = self._client.get_or_create_collection(
            name=COLLECTION_NAME,
            metadata={"hnsw:space": "cosine"},
        )

    def add_chunks(
        self,
        chunks: list[Chunk],
        document_id: str,
        strategy: ChunkingStrategy,
        source: str = "",
        source_path: str = "",
    ) -> int:
        """Add a document's chunks, in order, to the collection.

        An empty source keeps each chunk's own source. source_path is the
        resolved file path used for duplicate detection.

        Returns the number of chunks added.
        """
        if not chunks:
            return 0

        ids = []
        embeddings = []
        documents = []
        metadatas = []

        for index, chunk in enumerate(chunks):
            ids.append(f"{document_id}:{index}")
            embeddings.append(chunk.embedding)
            metadata = _flatten(chunk.metadata)
            if isinstance(chunk, SemanticChunk):
                documents.append(chunk.page_content)
            elif isinstance(chunk, AgenticChunk):
                documents.append(chunk.text)
                metadata.update({
                    "chunk_id": chunk.chunk_id,
                    "title": chunk.title.strip(),
                    "summary": chunk.summary.strip(),
                    "proposition_count": chunk.proposition_count,
                })
            else:
                raise TypeError(f"Unsupported chunk type: {type(chunk).__name__}")
            metadata.update({
                "document_id": document_id,
                "chunking_strategy": ChunkingStrategy(strategy).value,
                "chunk_index": index,
            })
            if source:
                metadata["source"] = source
            if source_path:
                metadata["source_path"] = source_path
            metadatas.append(metadata)

        self._collection.add(
            ids=ids,
            embeddings=embeddings,
            documents=documents,
            metadatas=metadatas,
        )
        logger.debug("Stored %d chunks for document %s", len(ids), document_id)
        return len(ids)

    def has_document(
        self,
        source_path: str,
        strategy: ChunkingStrategy | str | None = None,
    ) -> bool:
        """Check if chunks from the given file, optionally for one strategy, already exist."""
        results = self._collection.get(
            where=build_where(strategy=strategy, source_path=source_path),
            limit=1,
        )
        return len(results["ids"]) > 0

    def delete_document(self, document_id: str) -> None:
        """Remove every chunk belonging to a document."""
        self._collection.delete(where={"document_id": document_id})

    def query(
        self,
        query_embedding: list[float],
        top_k: int = 5,
        document_id: str | None = None,
        strategy: ChunkingStrategy | str | None = None,
    ) -> list[dict]:
        """Nearest-neighbour lookup by cosine distance.

        Returns a list of dicts with keys: id, text, metadata, distance.
        """
        kwargs = {
            "query_embeddings": [query_embedding],
            "n_results": top_k,
        }
        where = build_where(document_id, strategy)
        if where is not None:
            kwargs["where"] = where

        results = self._collection.query(**kwargs)

        output = []
        if results["ids"] and results["ids"][0]:
            for i in range(len(results["ids"][0])):
                output.append({
                    "id": results["ids"][0][i],
                    "text": results["documents"][0][i] if results["documents"] else "",
                    "metadata": results["metadatas"][0][i] if results["metadatas"] else {},
                    "distance": results["distances"][0][i] if results["distances"] else 0.0,
                })
        return output

    def get_document_chunks(self, document_id: str) -> list[dict]:
        """Retrieve all chunks for a specific document in chunk order."""
        results = self._collection.get(
            where={"document_id": document_id},
        )
        output = []
        for i in range(len(results["ids"])):
            output.append({
                "id": results["ids"][i],
                "text": results["documents"][i] if results["documents"] else "",
                "metadata": results["metadatas"][i] if results["metadatas"] else {},
            })
        output.sort(key=lambda c: c["metadata"].get("chunk_index", 0))
        return output

    @property
    def count(self) -> int:
        """Return the number of chunks in the collection."""
        return self._collection.count()


def build_where(
    document_id: str | None = None,
    strategy: ChunkingStrategy | str | None = None,
    source_path: str | None = None,
) -> dict | None:
    """Build a Chroma where filter from optional document/strategy/path filters."""
    clauses = []
    if document_id is not None:
        clauses.append({"document_id": document_id})
    if strategy is not None:
        clauses.append({"chunking_strategy": ChunkingStrategy(strategy).value})
    if source_path is not None:
        clauses.append({"source_path": source_path})

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _flatten(metadata: dict) -> dict:
    """Keep only values Chroma can store (str, int, float, bool)."""
    return {
        k: v for k, v in metadata.items()
        if isinstance(v, (str, int, float, bool))
    }
