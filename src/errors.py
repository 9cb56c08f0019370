"""Exception types raised by the chunking core and its collaborators."""


class DocChunkError(Exception):
    """Base class for all DocChunk failures."""


class NormalizationError(DocChunkError):
    """Raised when input cannot be coerced into text at all."""


class ExtractionError(DocChunkError):
    """Raised when every PDF extraction backend failed or produced no text."""


class EmbeddingError(DocChunkError):
    """Raised when the embedding backend fails or returns malformed vectors."""


class CompletionError(DocChunkError):
    """Raised when the text-generation backend fails or returns non-text."""


class PropositionParseError(DocChunkError):
    """Malformed proposition list from the extractor.

    Recovered inside PropositionExtractor; it never escapes to callers.
    """


class ChunkingCancelled(DocChunkError):
    """Raised when a chunking run is cancelled between external calls."""
