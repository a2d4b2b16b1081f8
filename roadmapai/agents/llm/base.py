## Base LLM Client Interface
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from roadmapai.agents.schemas import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE = 1.0
DEFAULT_TIMEOUT = 60.0


class GenerationError(Exception):
    """Base class for failures talking to the generation provider."""


class GenerationUnavailable(GenerationError):
    """Transient failures persisted past the retry ceiling (or the deadline)."""


class GenerationRequestError(GenerationError):
    """Provider answered with a non-retryable status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Generation API error: {status_code} {detail}".strip())


class MalformedResponse(GenerationError):
    """Response body did not have the provider's expected envelope."""


class UpstreamStatusError(Exception):
    """Raised by provider transports for any non-2xx response."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}")


class UpstreamTransportError(Exception):
    """Raised by provider transports when no HTTP response was received."""


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class Deadline:
    """Wall-clock budget shared by every call made for one request."""

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0


class LLMClient(ABC):
    def __init__(
        self,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.timeout = timeout
        self._sleep = sleep

    @abstractmethod
    def _send(
        self,
        *,
        system: str | None,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int | None,
        timeout: float,
    ) -> str:
        """Perform one HTTP call and return the raw response body.

        Must raise UpstreamStatusError for non-2xx responses and
        UpstreamTransportError when the request never got a response.
        """
        raise NotImplementedError

    @abstractmethod
    def extract_text(self, raw: str) -> str:
        """Unwrap the generated text from the provider's response envelope."""
        raise NotImplementedError

    def generate_raw(
        self,
        *,
        user: str,
        system: str | None = None,
        history: Sequence[ChatMessage] = (),
        temperature: float = 0.2,
        max_tokens: int | None = None,
        deadline: Deadline | None = None,
    ) -> str:
        """Call the provider, retrying 429/5xx and transport failures with
        exponential backoff (backoff_base * 2**attempt)."""
        messages = [*history, ChatMessage(role="user", content=user)]
        last_err: Exception | None = None

        for attempt in range(self.max_retries + 1):
            if deadline is not None and deadline.expired:
                raise GenerationUnavailable(
                    f"Request deadline exceeded after {attempt} attempt(s)"
                ) from last_err

            timeout = self.timeout
            if deadline is not None:
                timeout = min(timeout, deadline.remaining())

            try:
                return self._send(
                    system=system,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    timeout=timeout,
                )
            except UpstreamStatusError as e:
                if not is_retryable_status(e.status_code):
                    raise GenerationRequestError(e.status_code, e.body[:300]) from e
                last_err = e
            except UpstreamTransportError as e:
                last_err = e

            if attempt == self.max_retries:
                break

            delay = self.backoff_base * (2 ** attempt)
            if deadline is not None:
                if deadline.remaining() <= delay:
                    raise GenerationUnavailable(
                        f"Request deadline leaves no room to retry after: {last_err}"
                    ) from last_err
            logger.warning(
                "Generation attempt %d/%d failed (%s); retrying in %.1fs",
                attempt + 1,
                self.max_retries + 1,
                last_err,
                delay,
            )
            self._sleep(delay)

        raise GenerationUnavailable(
            f"Generation failed after {self.max_retries + 1} attempts: {last_err}"
        ) from last_err

    def generate_text(self, **kwargs) -> str:
        return self.extract_text(self.generate_raw(**kwargs))


def extract_chat_completion_text(raw: str) -> str:
    """Text of the first choice in an OpenAI-style chat completion body."""
    try:
        data = json.loads(raw)
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedResponse(f"Unexpected chat completion response: {e}") from e
    if not content:
        raise MalformedResponse("Chat completion returned no content")
    return content.strip()
