from typing import Sequence

import openai
from openai import OpenAI

from .base import (
    LLMClient,
    UpstreamStatusError,
    UpstreamTransportError,
    extract_chat_completion_text,
)
from roadmapai.agents.schemas import ChatMessage


class GroqOpenAIClient(LLMClient):
    def __init__(self, *, api_key: str, base_url: str, model: str, **kwargs):
        super().__init__(**kwargs)
        # retries are owned by LLMClient.generate_raw
        self.client = OpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self.model = model

    def _send(
        self,
        *,
        system: str | None,
        messages: Sequence[ChatMessage],
        temperature: float,
        max_tokens: int | None,
        timeout: float,
    ) -> str:
        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]

        extra = {"max_tokens": max_tokens} if max_tokens is not None else {}
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=chat,
                timeout=timeout,
                **extra,
            )
        except openai.APIStatusError as e:
            raise UpstreamStatusError(e.status_code, str(e)) from e
        except openai.APIConnectionError as e:
            raise UpstreamTransportError(str(e)) from e
        return resp.model_dump_json()

    def extract_text(self, raw: str) -> str:
        return extract_chat_completion_text(raw)
