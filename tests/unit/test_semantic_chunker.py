"""Unit tests for the word-count semantic chunker."""

import math

import pytest

from src.ingestion.cleaner import normalize_text
from src.ingestion.semantic_chunker import (
    SemanticChunker,
    count_unique_pages,
    count_words,
    estimate_tokens,
)
from src.models.chunk import SemanticChunk
from src.models.document import ExtractedPage, SourceDocument
from tests.fakes import FAKE_DIMENSION, FakeEmbeddingProvider


def make_text(n_words: int) -> str:
    """Words spread over lines and paragraphs so whitespace varies."""
    parts = []
    for i in range(n_words):
        parts.append(f"word{i}")
        if i % 17 == 16:
            parts.append("\n\n")
        elif i % 5 == 4:
            parts.append("\n")
        else:
            parts.append(" ")
    return "".join(parts)


@pytest.fixture
def embedder():
    return FakeEmbeddingProvider()


@pytest.fixture
def chunker(embedder):
    return SemanticChunker(embedder, min_words=300)


class TestSplitText:
    def test_every_chunk_but_last_reaches_min_words(self, chunker):
        pieces = chunker.split_text(normalize_text(make_text(1000)))
        assert len(pieces) == 4
        for piece in pieces[:-1]:
            assert count_words(piece) >= 300
        assert count_words(pieces[-1]) == 100

    def test_completeness(self, chunker):
        text = normalize_text(make_text(777))
        pieces = chunker.split_text(text)
        rejoined = " ".join(pieces).split()
        assert rejoined == text.split()

    def test_preserves_inner_whitespace(self, chunker):
        text = normalize_text(make_text(120))
        assert chunker.split_text(text) == [text]

    def test_short_document_yields_one_chunk(self, chunker):
        assert chunker.split_text("just a few words") == ["just a few words"]

    def test_exact_multiple_has_no_empty_tail(self):
        chunker = SemanticChunker(FakeEmbeddingProvider(), min_words=3)
        assert chunker.split_text("a b c d e f") == ["a b c", "d e f"]

    def test_empty_text(self, chunker):
        assert chunker.split_text("") == []

    def test_rejects_invalid_min_words(self, embedder):
        with pytest.raises(ValueError):
            SemanticChunker(embedder, min_words=0)


class TestSplitDocuments:
    def test_empty_input_yields_no_chunks(self, chunker, embedder):
        assert chunker.chunk_text("  \n\n\x00 ") == []
        assert embedder.calls == []

    def test_short_document_yields_single_chunk(self, chunker):
        chunks = chunker.chunk_text("A short statement about chunking.")
        assert len(chunks) == 1
        assert chunks[0].page_content == "A short statement about chunking."

    def test_each_chunk_embedded_separately(self, chunker, embedder):
        chunks = chunker.chunk_text(make_text(650))
        assert len(chunks) == 3
        assert embedder.calls == [[c.page_content] for c in chunks]
        for chunk in chunks:
            assert len(chunk.embedding) == FAKE_DIMENSION

    def test_token_and_word_counts(self, chunker):
        chunk = chunker.chunk_text("Twelve chars and more")[0]
        assert chunk.token_count == math.ceil(len("Twelve chars and more") / 4)
        assert chunk.word_count == 4

    def test_merges_document_metadata(self, chunker):
        chunks = chunker.chunk_text(
            make_text(400),
            source="notes.txt",
            metadata={"author": "Ada", "type": "text"},
        )
        for chunk in chunks:
            assert isinstance(chunk, SemanticChunk)
            meta = chunk.metadata
            assert meta["source"] == "notes.txt"
            assert meta["author"] == "Ada"
            assert meta["type"] == "text"
            assert "token_count" in meta and "word_count" in meta
            assert "page_number" not in meta

    def test_chunks_do_not_share_metadata(self, chunker):
        chunks = chunker.chunk_text(make_text(400), metadata={"author": "Ada"})
        assert len(chunks) == 2
        assert chunks[0].extra == chunks[1].extra
        assert chunks[0].extra is not chunks[1].extra

    def test_chunks_never_span_documents(self, chunker):
        docs = [SourceDocument(text="first doc"), SourceDocument(text="second doc")]
        chunks = chunker.split_documents(docs)
        assert [c.page_content for c in chunks] == ["first doc", "second doc"]

    def test_to_dict_shape(self, chunker):
        rendered = chunker.chunk_text("some words", source="a.txt")[0].to_dict()
        assert set(rendered) == {"page_content", "embedding", "metadata"}
        assert rendered["metadata"]["source"] == "a.txt"

    def test_unused_thresholds_are_kept(self, embedder):
        chunker = SemanticChunker(embedder, min_words=10, max_tokens=99, similarity_threshold=0.7)
        assert chunker.max_tokens == 99
        assert chunker.similarity_threshold == 0.7
        assert len(chunker.chunk_text(make_text(25))) == 3


class TestChunkPages:
    def test_page_metadata_on_every_chunk(self, chunker):
        pages = [
            ExtractedPage(1, make_text(450), "pymupdf"),
            ExtractedPage(2, "Only a handful of words on page two.", "pymupdf"),
        ]
        chunks = chunker.chunk_pages(pages, source="report.pdf")

        assert [c.page_number for c in chunks] == [1, 1, 2]
        for chunk in chunks:
            assert chunk.extraction_method == "pymupdf"
            assert chunk.source == "report.pdf"
            assert chunk.metadata["type"] == "pdf"

    def test_chunks_never_span_pages(self):
        chunker = SemanticChunker(FakeEmbeddingProvider(), min_words=5)
        pages = [ExtractedPage(1, "a b c", "pymupdf"), ExtractedPage(2, "d e f", "pymupdf")]
        chunks = chunker.chunk_pages(pages)
        assert [c.page_content for c in chunks] == ["a b c", "d e f"]

    def test_count_unique_pages(self, chunker):
        pages = [
            ExtractedPage(1, make_text(350), "tesseract_ocr"),
            ExtractedPage(3, "tail", "tesseract_ocr"),
        ]
        assert count_unique_pages(chunker.chunk_pages(pages)) == 2


class TestEstimateTokens:
    def test_rounds_up(self):
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("abcd") == 1
