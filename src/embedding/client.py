"""Batching embedding client with upstream validation."""

import logging
import time

from src.embedding.provider import EmbeddingProvider
from src.errors import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY = 1.0


class BatchedEmbeddingClient(EmbeddingProvider):
    """Wraps a provider, sending inputs in fixed-size batches.

    Batching is invisible to callers: the result has one vector per input,
    in input order. A pause is inserted between batches to stay under the
    backend's rate limit.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        expected_dimension: int | None = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._provider = provider
        self._batch_size = batch_size
        self._batch_delay = batch_delay
        self._expected_dimension = expected_dimension or None

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        batches = [texts[i:i + self._batch_size] for i in range(0, len(texts), self._batch_size)]

        for i, batch in enumerate(batches):
            if i > 0 and self._batch_delay > 0:
                time.sleep(self._batch_delay)
            vectors.extend(self._embed_batch(batch))

        self._check_dimensions(vectors)
        return vectors

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            vectors = self._provider.embed_query(texts)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Query embedding failed: {e}") from e
        if len(vectors) != len(texts):
            raise EmbeddingError(f"Expected {len(texts)} query embeddings, got {len(vectors)}")
        self._check_dimensions(vectors)
        return [list(v) for v in vectors]

    @property
    def dimension(self) -> int:
        return self._expected_dimension or self._provider.dimension

    def _embed_batch(self, batch: list[str]) -> list[list[float]]:
        try:
            vectors = self._provider.embed(batch)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding backend failed on batch of {len(batch)}: {e}") from e

        if len(vectors) != len(batch):
            raise EmbeddingError(f"Expected {len(batch)} embeddings, got {len(vectors)}")
        logger.debug("Embedded batch of %d texts", len(batch))
        return [list(v) for v in vectors]

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        dims = {len(v) for v in vectors}
        if len(dims) > 1:
            raise EmbeddingError(f"Inconsistent embedding dimensions: {sorted(dims)}")
        dim = dims.pop()
        if dim == 0:
            raise EmbeddingError("Embedding backend returned empty vectors")
        if self._expected_dimension is not None and dim != self._expected_dimension:
            raise EmbeddingError(
                f"Embedding dimension must be {self._expected_dimension}, got {dim}"
            )
