"""Integration tests for the full ingestion pipeline.

These tests verify the complete flow: read → normalize → chunk → embed → store.
Completion and embedding backends are scripted fakes; Chroma runs in memory.
"""

from unittest.mock import MagicMock

import pytest

from config.settings import Settings
from src.errors import CompletionError
from src.ingestion.pipeline import run_ingestion
from src.models.document import ExtractedPage
from src.vectorstore.chroma_store import COLLECTION_NAME, ChromaStore
from tests.fakes import FakeEmbeddingProvider, ScriptedCompletionClient

SAMPLE_TEXT = """Greg likes pizza and pasta.


The sky is blue over the bay.
"""

PROPOSITIONS = {
    "Greg likes pizza and pasta.": '["Greg likes pizza.", "Greg likes pasta."]',
    "The sky is blue over the bay.": 'Here you go: ["The sky is blue."]',
}


def route_food(proposition, chunk_ids):
    if "Greg" in proposition and chunk_ids:
        return chunk_ids[0]
    return "No chunks"


@pytest.fixture
def store():
    store = ChromaStore(path=":memory:")
    store._client.delete_collection(COLLECTION_NAME)
    store._collection = store._client.get_or_create_collection(
        name=COLLECTION_NAME, metadata={"hnsw:space": "cosine"}
    )
    return store


@pytest.fixture
def settings(tmp_path):
    return Settings(
        docchunk_request_delay=0,
        docchunk_min_words=4,
        docchunk_text_path=str(tmp_path / "chunks"),
    )


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path


class TestSemanticIngestion:
    def test_chunks_stored_and_searchable(self, store, settings, sample_file):
        embedder = FakeEmbeddingProvider()
        result = run_ingestion(sample_file, "semantic", store, embedder, settings=settings)

        assert result["skipped"] is False
        assert result["chunks_stored"] == store.count
        assert result["chunks_stored"] >= 2

        rows = store.get_document_chunks(result["document_id"])
        assert rows[0]["text"].startswith("Greg likes")
        assert all(r["metadata"]["chunking_strategy"] == "semantic" for r in rows)
        assert all(r["metadata"]["source"] == "notes.txt" for r in rows)

        hits = store.query(embedder.embed([rows[0]["text"]])[0], top_k=1)
        assert hits[0]["distance"] == pytest.approx(0.0, abs=1e-5)

    def test_same_file_same_strategy_skipped(self, store, settings, sample_file):
        embedder = FakeEmbeddingProvider()
        first = run_ingestion(sample_file, "semantic", store, embedder, settings=settings)
        second = run_ingestion(sample_file, "semantic", store, embedder, settings=settings)

        assert second["skipped"] is True
        assert store.count == first["chunks_stored"]

    def test_same_file_other_strategy_ingested(self, store, settings, sample_file):
        embedder = FakeEmbeddingProvider()
        completion = ScriptedCompletionClient(classify=route_food, propositions=PROPOSITIONS)
        first = run_ingestion(sample_file, "semantic", store, embedder, settings=settings)
        second = run_ingestion(sample_file, "agentic", store, embedder, completion=completion, settings=settings)

        assert second["skipped"] is False
        assert second["chunks_stored"] == 2
        assert store.count == first["chunks_stored"] + 2

    def test_same_name_in_other_directory_ingested(self, store, settings, tmp_path):
        embedder = FakeEmbeddingProvider()
        for folder, text in (("a", "alpha beta gamma delta"), ("b", "epsilon zeta eta theta")):
            (tmp_path / folder).mkdir()
            (tmp_path / folder / "notes.txt").write_text(text, encoding="utf-8")

        first = run_ingestion(tmp_path / "a" / "notes.txt", "semantic", store, embedder, settings=settings)
        second = run_ingestion(tmp_path / "b" / "notes.txt", "semantic", store, embedder, settings=settings)

        assert first["skipped"] is False
        assert second["skipped"] is False
        rows = store.get_document_chunks(second["document_id"])
        assert rows[0]["text"] == "epsilon zeta eta theta"
        assert rows[0]["metadata"]["source"] == "notes.txt"
        assert rows[0]["metadata"]["source_path"] == str((tmp_path / "b" / "notes.txt").resolve())

    def test_empty_file_stores_nothing(self, settings, tmp_path):
        path = tmp_path / "blank.txt"
        path.write_text("  \n\n\t  ", encoding="utf-8")
        store = MagicMock()
        store.has_document.return_value = False

        result = run_ingestion(path, "semantic", store, FakeEmbeddingProvider(), settings=settings)

        assert result["document_id"] is None
        assert result["chunks_stored"] == 0
        assert result["skipped"] is False
        store.add_chunks.assert_not_called()

    def test_save_chunks_writes_debug_file(self, store, settings, sample_file):
        run_ingestion(sample_file, "semantic", store, FakeEmbeddingProvider(), settings=settings, save_chunks=True)

        written = settings.text_path / "notes.semantic.chunks.txt"
        assert written.exists()
        assert "# Chunk 1 | Page: N/A" in written.read_text(encoding="utf-8")

    def test_pdf_pages_keep_page_numbers(self, store, settings, tmp_path):
        extractor = MagicMock()
        extractor.extract.return_value = [
            ExtractedPage(1, "First page words go right here.", "pymupdf"),
            ExtractedPage(3, "Third page words go right here.", "pymupdf"),
        ]
        result = run_ingestion(
            tmp_path / "report.pdf", "semantic", store, FakeEmbeddingProvider(),
            pdf_extractor=extractor, settings=settings,
        )

        assert result["pages"] == 2
        rows = store.get_document_chunks(result["document_id"])
        # six words per page at min_words=4 gives two chunks per page
        assert [r["metadata"]["page_number"] for r in rows] == [1, 1, 3, 3]
        assert rows[0]["metadata"]["type"] == "pdf"

    def test_unsupported_suffix_rejected(self, store, settings, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG")
        with pytest.raises(ValueError, match="Unsupported file type"):
            run_ingestion(path, "semantic", store, FakeEmbeddingProvider(), settings=settings)


class TestAgenticIngestion:
    def test_propositions_grouped_and_stored(self, store, settings, sample_file):
        completion = ScriptedCompletionClient(classify=route_food, propositions=PROPOSITIONS)
        result = run_ingestion(
            sample_file, "agentic", store, FakeEmbeddingProvider(),
            completion=completion, settings=settings,
        )

        assert result["chunks_stored"] == 2
        rows = store.get_document_chunks(result["document_id"])
        assert rows[0]["text"] == "Greg likes pizza.\nGreg likes pasta."
        assert rows[0]["metadata"]["proposition_count"] == 2
        assert rows[1]["text"] == "The sky is blue."
        assert all(r["metadata"]["chunking_strategy"] == "agentic" for r in rows)

        messages = [a["message"] for a in result["actions"]]
        assert "Chunk found" in messages
        assert messages.count("Created new chunk with embedding") == 2

    def test_requires_completion_client(self, store, settings, sample_file):
        with pytest.raises(ValueError, match="completion client"):
            run_ingestion(sample_file, "agentic", store, FakeEmbeddingProvider(), settings=settings)

    def test_completion_failure_stores_nothing(self, store, settings, sample_file):
        completion = ScriptedCompletionClient(
            classify=route_food, propositions=PROPOSITIONS, fail_on="which needs a title"
        )
        with pytest.raises(CompletionError):
            run_ingestion(
                sample_file, "agentic", store, FakeEmbeddingProvider(),
                completion=completion, settings=settings,
            )
        assert store.count == 0


class TestRollback:
    def test_failed_store_write_is_rolled_back(self, settings, sample_file):
        store = MagicMock()
        store.has_document.return_value = False
        store.add_chunks.side_effect = RuntimeError("disk full")

        with pytest.raises(RuntimeError, match="disk full"):
            run_ingestion(sample_file, "semantic", store, FakeEmbeddingProvider(), settings=settings)

        document_id = store.add_chunks.call_args.kwargs["document_id"]
        store.delete_document.assert_called_once_with(document_id)
