from roadmapai.settings import settings
from roadmapai.agents.llm.base import LLMClient
from roadmapai.agents.llm.gemini import GeminiClient
from roadmapai.agents.llm.groq import GroqOpenAIClient
from roadmapai.agents.llm.ollama import OllamaOpenAIClient


class MissingCredentials(Exception):
    """The selected provider needs an API key that is not configured."""


def get_llm_client() -> LLMClient:
    policy = {
        "max_retries": settings.llm_max_retries,
        "backoff_base": settings.llm_backoff_base_seconds,
        "timeout": settings.llm_timeout_seconds,
    }
    provider = settings.LLM_PROVIDER.lower()

    if provider == "groq":
        if not settings.GROQ_API_KEY:
            raise MissingCredentials("GROQ_API_KEY is not configured")
        return GroqOpenAIClient(
            api_key=settings.GROQ_API_KEY,
            base_url=settings.GROQ_BASE_URL,
            model=settings.GROQ_MODEL,
            **policy,
        )

    if provider == "ollama":
        return OllamaOpenAIClient(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            **policy,
        )

    if not settings.GEMINI_API_KEY:
        raise MissingCredentials("GEMINI_API_KEY is not configured")
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        **policy,
    )
