## Shared request dependencies
import logging

from roadmapai.agents.llm.base import Deadline, LLMClient
from roadmapai.agents.llm.client import MissingCredentials, get_llm_client
from roadmapai.settings import settings

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Caller sent a request the service cannot act on."""


def get_llm() -> LLMClient:
    try:
        return get_llm_client()
    except MissingCredentials:
        logger.error("Generation API credential is not configured (provider=%s)", settings.LLM_PROVIDER)
        raise


def get_optional_llm() -> LLMClient | None:
    """Like get_llm, but lets the endpoint degrade when no key is configured."""
    try:
        return get_llm_client()
    except MissingCredentials:
        logger.error("Generation API credential is not configured (provider=%s)", settings.LLM_PROVIDER)
        return None


def get_deadline() -> Deadline:
    return Deadline(settings.request_timeout_seconds)
