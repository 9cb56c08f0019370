"""Sentence Transformer embedding provider implementation."""

import logging

from sentence_transformers import SentenceTransformer

from src.embedding.provider import EmbeddingProvider
from src.errors import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/embeddinggemma-300m"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embedding provider wrapping a local sentence-transformers model.

    Default model: embeddinggemma-300m (768 dimensions).
    """

    def __init__(self, model_name: str = DEFAULT_MODEL):
        logger.info("Loading embedding model: %s", model_name)
        try:
            self._model = SentenceTransformer(model_name, local_files_only=True)
        except OSError:
            self._model = SentenceTransformer(model_name)
        self._model_name = model_name
        self._dimension = self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        try:
            embeddings = self._model.encode(texts, show_progress_bar=False)
        except RuntimeError as e:
            raise EmbeddingError(f"{self._model_name} failed to encode: {e}") from e
        return embeddings.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
