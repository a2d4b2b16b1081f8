import json

import httpx
import pytest

from roadmapai.agents.llm.base import GenerationUnavailable, MalformedResponse
from roadmapai.agents.llm.gemini import GeminiClient
from roadmapai.agents.llm.ollama import OllamaOpenAIClient
from roadmapai.agents.schemas import ChatMessage


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def _client(handler, **kwargs):
    return GeminiClient(
        api_key="test-key",
        model="gemini-test",
        transport=httpx.MockTransport(handler),
        sleep=lambda s: None,
        **kwargs,
    )


def test_request_shape_and_text_extraction():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_gemini_body('{"title": "x"}'))

    client = _client(handler)
    text = client.generate_text(
        system="planner",
        user="make a plan",
        history=[ChatMessage(role="assistant", content="earlier")],
        temperature=0.2,
        max_tokens=8192,
    )

    assert text == '{"title": "x"}'
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "test-key"
    body = seen["body"]
    assert [c["role"] for c in body["contents"]] == ["model", "user"]
    assert body["contents"][1]["parts"][0]["text"] == "make a plan"
    assert body["systemInstruction"]["parts"][0]["text"] == "planner"
    assert body["generationConfig"]["maxOutputTokens"] == 8192


def test_raw_body_is_returned_untouched():
    payload = _gemini_body("hello")
    client = _client(lambda request: httpx.Response(200, json=payload))
    assert json.loads(client.generate_raw(user="x")) == payload


def test_503_then_success_is_retried():
    responses = iter([httpx.Response(503, text="overloaded"), httpx.Response(200, json=_gemini_body("ok"))])
    client = _client(lambda request: next(responses))
    assert client.generate_text(user="x") == "ok"


def test_network_failure_exhausts_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, max_retries=2)
    with pytest.raises(GenerationUnavailable):
        client.generate_text(user="x")
    assert len(calls) == 3


@pytest.mark.parametrize(
    "body",
    [{}, {"candidates": []}, {"candidates": [{"content": {"parts": [{"text": "  "}]}}]}],
)
def test_unexpected_envelope_is_malformed(body):
    client = _client(lambda request: httpx.Response(200, json=body))
    with pytest.raises(MalformedResponse):
        client.generate_text(user="x")


def test_ollama_uses_openai_chat_format():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hi there"}}]})

    client = OllamaOpenAIClient(
        "http://localhost:11434/v1/", "llama3.1", transport=httpx.MockTransport(handler)
    )
    assert client.generate_text(system="sys", user="hello") == "hi there"
    assert seen["url"] == "http://localhost:11434/v1/chat/completions"
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hello"},
    ]
