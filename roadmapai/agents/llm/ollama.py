from typing import Sequence

import httpx

from roadmapai.agents.llm.base import (
    LLMClient,
    UpstreamStatusError,
    UpstreamTransportError,
    extract_chat_completion_text,
)
from roadmapai.agents.schemas import ChatMessage


class OllamaOpenAIClient(LLMClient):
    def __init__(
        self,
        base_url: str,
        model: str,
        *,
        transport: httpx.BaseTransport | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._transport = transport

    def _send(
        self,
        *,
        system: str | None,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int | None,
        timeout: float,
    ) -> str:
        # Ollama OpenAI-compatible endpoint
        # POST {base_url}/chat/completions with OpenAI message format
        url = f"{self.base_url}/chat/completions"

        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]
        payload = {
            "model": self.model,
            "messages": chat,
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        headers = {
            "Content-Type": "application/json",
            # OpenAI-compatible clients require an api key field; Ollama ignores it
            "Authorization": "Bearer ollama",
        }

        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                r = client.post(url, json=payload, headers=headers)
        except httpx.TransportError as e:
            raise UpstreamTransportError(f"{type(e).__name__}: {e}") from e

        if r.status_code >= 400:
            raise UpstreamStatusError(r.status_code, r.text)
        return r.text

    def extract_text(self, raw: str) -> str:
        return extract_chat_completion_text(raw)
