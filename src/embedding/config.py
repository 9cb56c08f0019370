"""Embedding provider selection from configuration."""

from config.settings import Settings, get_settings
from src.embedding.client import BatchedEmbeddingClient
from src.embedding.provider import EmbeddingProvider


def get_embedding_provider(settings: Settings | None = None) -> EmbeddingProvider:
    """Create the configured embedding backend wrapped in a batching client.

    Default: local sentence-transformers model.
    """
    settings = settings or get_settings()
    provider = settings.docchunk_embedding_provider.lower()

    if provider == "sentence_transformers":
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        backend = SentenceTransformerEmbeddingProvider(settings.docchunk_embedding_model)
    elif provider == "ollama":
        from src.embedding.ollama import OllamaEmbeddingProvider

        backend = OllamaEmbeddingProvider(
            model_name=settings.docchunk_embedding_model,
            base_url=settings.ollama_base_url,
            timeout=settings.docchunk_request_timeout,
        )
    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'sentence_transformers', 'ollama'"
        )

    return BatchedEmbeddingClient(
        backend,
        batch_size=settings.docchunk_embedding_batch_size,
        batch_delay=settings.docchunk_embedding_batch_delay,
        expected_dimension=settings.docchunk_embedding_dimension,
    )
