"""LLM-driven agentic chunker.

Propositions are routed one at a time: the model either names an existing
topic chunk for the proposition or a new chunk is started. Every mutation
refreshes the chunk's summary, title and embedding, so each routing
decision sees the full state built by the propositions before it. The
fold is strictly sequential.
"""

import logging
import uuid
from pathlib import Path

from src.embedding.provider import EmbeddingProvider
from src.errors import ExtractionError
from src.ingestion.cleaner import normalize_text, split_paragraphs
from src.ingestion.pdf_extractor import PdfExtractor
from src.ingestion.propositions import PropositionExtractor
from src.llm.client import CompletionClient
from src.llm.prompts import (
    FIND_CHUNK_PROMPT,
    NEW_CHUNK_SUMMARY_PROMPT,
    NEW_CHUNK_TITLE_PROMPT,
    UPDATE_SUMMARY_PROMPT,
    UPDATE_TITLE_PROMPT,
)
from src.llm.throttle import CancellationToken, Throttle
from src.models.action import ActionLog
from src.models.chunk import AgenticChunk, RouteDecision
from src.models.document import ExtractedPage, TaggedProposition

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_ID_LENGTH = 5
DEFAULT_REQUEST_DELAY = 0.5


class AgenticChunkingRun:
    """Chunk set and action log for one top-level chunking call.

    A run is never shared: concurrent documents need their own runs.
    """

    def __init__(
        self,
        completion: CompletionClient,
        embedder: EmbeddingProvider,
        chunk_id_length: int = DEFAULT_CHUNK_ID_LENGTH,
        throttle: Throttle | None = None,
        cancel_token: CancellationToken | None = None,
    ):
        if not 1 <= chunk_id_length <= 32:
            raise ValueError("chunk_id_length must be between 1 and 32")
        self._completion = completion
        self._embedder = embedder
        self.chunk_id_length = chunk_id_length
        self.throttle = throttle or Throttle(0)
        self._cancel_token = cancel_token
        self.chunks: dict[str, AgenticChunk] = {}
        self.actions = ActionLog()
        self.tagged_propositions: list[TaggedProposition] = []

    def check_cancelled(self) -> None:
        if self._cancel_token is not None:
            self._cancel_token.raise_if_cancelled()

    def add_propositions(self, propositions: list[str]) -> None:
        """Route propositions in order, pacing the model calls."""
        for proposition in propositions:
            self.check_cancelled()
            self.throttle.wait()
            self.add_proposition(proposition)

    def add_proposition(self, proposition: str) -> None:
        self.actions.log("Adding proposition", proposition=proposition)

        if not self.chunks:
            self.actions.log("No chunks exist, creating new chunk")
            self.create_chunk(proposition)
            return

        decision = self.find_relevant_chunk(proposition)
        if decision.is_match:
            chunk = self.chunks[decision.chunk_id]
            self.actions.log("Chunk found", chunk_id=chunk.chunk_id, title=chunk.title)
            self.add_proposition_to_chunk(chunk.chunk_id, proposition)
            return

        self.actions.log("No matching chunk found, creating new chunk")
        self.create_chunk(proposition)

    def find_relevant_chunk(self, proposition: str) -> RouteDecision:
        """Ask the model which existing chunk, if any, fits the proposition.

        Only a response exactly chunk_id_length long that names a chunk in
        this run counts as a match; anything else means "create a new chunk".
        """
        prompt = FIND_CHUNK_PROMPT.format(outline=self.outline(), proposition=proposition)
        response = self._completion.complete(prompt).strip()

        if len(response) != self.chunk_id_length:
            return RouteDecision(chunk_id=None, raw_response=response)

        if response not in self.chunks:
            logger.warning("Classifier returned unknown chunk id %r, treating as no match", response)
            self.actions.log("Unknown chunk id returned", chunk_id=response)
            return RouteDecision(chunk_id=None, raw_response=response)

        return RouteDecision(chunk_id=response, raw_response=response)

    def add_proposition_to_chunk(self, chunk_id: str, proposition: str) -> AgenticChunk:
        chunk = self.chunks[chunk_id]
        chunk.propositions.append(proposition)
        chunk.summary = self._update_summary(chunk)
        chunk.title = self._update_title(chunk)
        # Full recompute over every proposition in the chunk
        chunk.embedding = self._embed(chunk.text)

        self.actions.log(
            "Updated chunk metadata and embedding",
            chunk_id=chunk_id,
            new_title=chunk.title,
        )
        return chunk

    def create_chunk(self, proposition: str) -> AgenticChunk:
        chunk_id = self._new_chunk_id()
        summary = self._complete(NEW_CHUNK_SUMMARY_PROMPT.format(proposition=proposition))
        title = self._complete(NEW_CHUNK_TITLE_PROMPT.format(summary=summary))
        embedding = self._embed(proposition)

        chunk = AgenticChunk(
            chunk_id=chunk_id,
            title=title,
            summary=summary,
            propositions=[proposition],
            creation_index=len(self.chunks),
            embedding=embedding,
        )
        self.chunks[chunk_id] = chunk

        self.actions.log(
            "Created new chunk with embedding",
            chunk_id=chunk_id,
            title=title,
            embedding_dimensions=len(embedding),
        )
        return chunk

    def outline(self) -> str:
        """Render id, title and summary of every chunk for the classifier."""
        outline = ""
        for chunk in self.chunks.values():
            outline += f"Chunk ID: {chunk.chunk_id}\n"
            outline += f"Chunk Name: {chunk.title}\n"
            outline += f"Chunk Summary: {chunk.summary}\n\n"
        return outline

    def get_chunks(self) -> list[AgenticChunk]:
        return list(self.chunks.values())

    def pretty_print_chunks(self) -> list[dict]:
        """Render chunks in creation order."""
        return [chunk.to_dict() for chunk in self.chunks.values()]

    def _update_summary(self, chunk: AgenticChunk) -> str:
        return self._complete(
            UPDATE_SUMMARY_PROMPT.format(propositions=chunk.text, summary=chunk.summary)
        )

    def _update_title(self, chunk: AgenticChunk) -> str:
        return self._complete(
            UPDATE_TITLE_PROMPT.format(propositions=chunk.text, summary=chunk.summary, title=chunk.title)
        )

    def _complete(self, prompt: str) -> str:
        return self._completion.complete(prompt).strip()

    def _embed(self, text: str) -> list[float]:
        return self._embedder.embed([text])[0]

    def _new_chunk_id(self) -> str:
        while True:
            chunk_id = uuid.uuid4().hex[:self.chunk_id_length]
            if chunk_id not in self.chunks:
                return chunk_id


class AgenticChunker:
    """Entry points for agentic chunking of documents and PDFs.

    Each call builds a fresh AgenticChunkingRun, so no state leaks between
    documents. The most recent successful run stays readable as last_run.
    Completion and embedding errors abort the whole call.
    """

    def __init__(
        self,
        completion: CompletionClient,
        embedder: EmbeddingProvider,
        chunk_id_length: int = DEFAULT_CHUNK_ID_LENGTH,
        request_delay: float = DEFAULT_REQUEST_DELAY,
        extractor: PropositionExtractor | None = None,
        pdf_extractor: PdfExtractor | None = None,
    ):
        self._completion = completion
        self._embedder = embedder
        self.chunk_id_length = chunk_id_length
        self.request_delay = request_delay
        self._extractor = extractor or PropositionExtractor(completion)
        self._pdf_extractor = pdf_extractor
        self._last_run: AgenticChunkingRun | None = None

    @property
    def last_run(self) -> AgenticChunkingRun | None:
        return self._last_run

    def new_run(self, cancel_token: CancellationToken | None = None) -> AgenticChunkingRun:
        return AgenticChunkingRun(
            self._completion,
            self._embedder,
            chunk_id_length=self.chunk_id_length,
            throttle=Throttle(self.request_delay),
            cancel_token=cancel_token,
        )

    def reset(self) -> AgenticChunkingRun:
        """Drop the previous run and start an empty one."""
        self._last_run = self.new_run()
        return self._last_run

    def process_document(self, text: str, cancel_token: CancellationToken | None = None) -> list[dict]:
        """Extract propositions paragraph by paragraph and chunk them."""
        run = self.new_run(cancel_token)
        paragraphs = split_paragraphs(normalize_text(text))

        all_propositions = []
        for i, paragraph in enumerate(paragraphs, start=1):
            run.check_cancelled()
            run.actions.log("Processing paragraph", paragraph_number=i)
            run.throttle.wait()
            all_propositions.extend(self._extractor.extract(paragraph))

        run.actions.log("Proposition extraction complete", total_propositions=len(all_propositions))
        logger.info(
            "Extracted %d propositions from %d paragraphs", len(all_propositions), len(paragraphs)
        )

        run.add_propositions(all_propositions)
        self._last_run = run
        logger.info("Agentic chunking produced %d chunks", len(run.chunks))
        return run.pretty_print_chunks()

    def process_pages(
        self,
        pages: list[ExtractedPage],
        source: str,
        cancel_token: CancellationToken | None = None,
    ) -> list[dict]:
        """Chunk propositions from extracted pages, stamping document metadata.

        Routing ignores page boundaries: propositions from different pages
        may share a chunk. The stamped metadata describes the whole document.
        """
        if not pages:
            raise ExtractionError("No text could be extracted from the PDF")

        run = self.new_run(cancel_token)
        tagged = self.tag_page_propositions(run, pages)

        run.add_propositions([p.text for p in tagged])

        document_metadata = {
            "source": source,
            "type": "pdf",
            "extraction_method": pages[0].extraction_method or "unknown",
            "total_pages": len(pages),
        }
        for chunk in run.chunks.values():
            chunk.metadata = dict(document_metadata)

        self._last_run = run
        logger.info("Agentic chunking of %s produced %d chunks", source, len(run.chunks))
        return run.pretty_print_chunks()

    def process_pdf_file(self, path: str | Path, cancel_token: CancellationToken | None = None) -> list[dict]:
        if self._pdf_extractor is None:
            self._pdf_extractor = PdfExtractor.from_settings()
        pages = self._pdf_extractor.extract(path)
        return self.process_pages(pages, source=Path(path).name, cancel_token=cancel_token)

    def tag_page_propositions(
        self,
        run: AgenticChunkingRun,
        pages: list[ExtractedPage],
    ) -> list[TaggedProposition]:
        """Extract propositions per page, tagging each with its page."""
        for page in pages:
            run.check_cancelled()
            run.actions.log(
                "Processing PDF page",
                page_number=page.page_number,
                extraction_method=page.extraction_method,
            )
            run.throttle.wait()
            for text in self._extractor.extract(page.text):
                run.tagged_propositions.append(
                    TaggedProposition(
                        text=text,
                        page_number=page.page_number,
                        extraction_method=page.extraction_method,
                    )
                )

        run.actions.log(
            "PDF proposition extraction complete",
            total_propositions=len(run.tagged_propositions),
            total_pages=len(pages),
        )
        return run.tagged_propositions
