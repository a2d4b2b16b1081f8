"""Shared fakes and payload builders for the test suite."""

from __future__ import annotations

import json

import pytest

from roadmapai.agents.llm.base import LLMClient, UpstreamTransportError


class ScriptedLLM(LLMClient):
    """LLMClient whose transport replays a fixed list of bodies or exceptions."""

    def __init__(self, replies=(), **kwargs):
        self.delays: list[float] = []
        kwargs.setdefault("sleep", self.delays.append)
        super().__init__(**kwargs)
        self.replies = list(replies)
        self.calls: list[dict] = []

    def _send(self, *, system, messages, temperature, max_tokens, timeout):
        self.calls.append(
            {
                "system": system,
                "messages": list(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
                "timeout": timeout,
            }
        )
        if not self.replies:
            raise UpstreamTransportError("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def extract_text(self, raw: str) -> str:
        return raw

    @property
    def prompts(self) -> list[str]:
        return [c["messages"][-1].content for c in self.calls]


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def day_dict(day: int, title: str | None = None) -> dict:
    title = title or f"Python topic number {day}"
    return {
        "day": day,
        "topic": title,
        "content": f"Study {title.lower()} and write a short script.",
        "resources": [
            {"type": "doc", "title": f"{title} docs", "url": f"https://docs.python.org/3/tutorial/day{day}.html"},
            {"type": "blog", "title": f"{title} article", "url": f"https://realpython.com/day-{day}/"},
        ],
    }


def chunk_json(start: int, end: int, title: str = "Python in Practice") -> str:
    return json.dumps({"title": title, "topics": [day_dict(d) for d in range(start, end + 1)]})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
