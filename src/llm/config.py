"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings, get_settings


def get_llm(settings: Settings | None = None) -> BaseChatModel:
    """Create and return the configured chat model.

    Uses LangChain's BaseChatModel abstraction for provider-agnostic access.
    Default: a local Ollama model via langchain-ollama.
    """
    settings = settings or get_settings()
    provider = settings.docchunk_llm_provider.lower()
    timeout = settings.docchunk_request_timeout

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=settings.docchunk_llm_model,
            base_url=settings.ollama_base_url,
            temperature=0,
            client_kwargs={"timeout": timeout},
        )
    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.docchunk_llm_model,
            temperature=0,
            timeout=timeout,
            api_key=settings.anthropic_api_key,
        )
    elif provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=settings.docchunk_llm_model,
            temperature=0,
            timeout=timeout,
        )
    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'ollama', 'anthropic', 'google'"
        )
