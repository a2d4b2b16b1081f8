import json
from typing import Sequence

import httpx

from roadmapai.agents.llm.base import (
    LLMClient,
    MalformedResponse,
    UpstreamStatusError,
    UpstreamTransportError,
)
from roadmapai.agents.schemas import ChatMessage


class GeminiClient(LLMClient):
    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        transport: httpx.BaseTransport | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
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
        # POST {base_url}/models/{model}:generateContent
        url = f"{self.base_url}/models/{self.model}:generateContent"

        generation_config = {"temperature": temperature, "topK": 40, "topP": 0.95}
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens

        payload = {
            "contents": [
                {
                    "role": "user" if m.role == "user" else "model",
                    "parts": [{"text": m.content}],
                }
                for m in messages
            ],
            "generationConfig": generation_config,
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
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
        try:
            data = json.loads(raw)
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponse(f"Unexpected Gemini API response structure: {e}") from e
        if not text.strip():
            raise MalformedResponse("Gemini API returned an empty candidate")
        return text
