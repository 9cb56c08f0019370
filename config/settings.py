"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """DocChunk settings loaded from environment variables."""

    # Completion model
    docchunk_llm_provider: str = "ollama"
    docchunk_llm_model: str = "gpt-oss:120b-cloud"
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Embedding
    docchunk_embedding_provider: str = "sentence_transformers"
    docchunk_embedding_model: str = "google/embeddinggemma-300m"
    docchunk_embedding_dimension: int = 768  # 0 disables the dimension check
    docchunk_embedding_batch_size: int = 10
    docchunk_embedding_batch_delay: float = 1.0

    # Chunking
    docchunk_min_words: int = 300
    docchunk_max_tokens: int = 1500
    docchunk_similarity_threshold: float = 0.5
    docchunk_chunk_id_length: int = 5

    # External call policy
    docchunk_request_delay: float = 0.5
    docchunk_request_timeout: float = 60.0
    docchunk_max_retries: int = 0

    # PDF extraction
    docchunk_extraction_method: str = "tesseract"
    docchunk_extraction_fallbacks: list[str] = ["pymupdf", "tesseract"]
    docchunk_ocr_dpi: int = 300

    # Storage
    docchunk_chroma_path: str = "./data/chroma"
    docchunk_text_path: str = "./data/chunks"

    @property
    def chroma_path(self) -> Path:
        return Path(self.docchunk_chroma_path)

    @property
    def text_path(self) -> Path:
        return Path(self.docchunk_text_path)

    def semantic_options(self) -> dict:
        """Keyword arguments for SemanticChunker."""
        return {
            "min_words": self.docchunk_min_words,
            "max_tokens": self.docchunk_max_tokens,
            "similarity_threshold": self.docchunk_similarity_threshold,
        }

    def agentic_options(self) -> dict:
        """Keyword arguments for AgenticChunker."""
        return {
            "chunk_id_length": self.docchunk_chunk_id_length,
            "request_delay": self.docchunk_request_delay,
        }

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
