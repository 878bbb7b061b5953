"""
Tests for the OpenAI Responses API generation provider.
"""

import asyncio
import json

import httpx
import pytest

from codegen_cache.errors import UpstreamError
from codegen_cache.repositories import OpenAIGenerationProvider


def make_provider(handler, **kwargs) -> OpenAIGenerationProvider:
    kwargs.setdefault("api_key", "sk-test")
    kwargs.setdefault("base_url", "https://api.test/v1")
    kwargs.setdefault("organization", "")
    kwargs.setdefault("project", "")
    kwargs.setdefault("output_index", 0)
    return OpenAIGenerationProvider(
        model_name="o4-mini",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def responses_body(*items) -> dict:
    return {"output": [{"content": [{"text": text}]} for text in items]}


def test_request_shape():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=responses_body("ok"))

    provider = make_provider(handler)
    asyncio.run(provider.generate("blink an LED"))

    (request,) = captured
    assert request.method == "POST"
    assert str(request.url) == "https://api.test/v1/responses"
    assert json.loads(request.content) == {"model": "o4-mini", "input": "blink an LED"}
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["Content-Type"] == "application/json"
    assert "OpenAI-Organization" not in request.headers
    assert "OpenAI-Project" not in request.headers


def test_organization_and_project_headers():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=responses_body("ok"))

    provider = make_provider(handler, organization="org-1", project="proj-1")
    asyncio.run(provider.generate("hi"))

    assert captured[0].headers["OpenAI-Organization"] == "org-1"
    assert captured[0].headers["OpenAI-Project"] == "proj-1"


def test_extracts_first_item_text_trimmed():
    provider = make_provider(
        lambda request: httpx.Response(200, json=responses_body("  import time\n", "ignored"))
    )

    assert asyncio.run(provider.generate("p")) == "import time"


def test_output_index_selects_item():
    body = {"output": [{"type": "reasoning", "content": []}, {"content": [{"text": "answer"}]}]}
    provider = make_provider(lambda request: httpx.Response(200, json=body), output_index=1)

    assert asyncio.run(provider.generate("p")) == "answer"


def test_empty_text_is_returned_as_empty_output():
    provider = make_provider(lambda request: httpx.Response(200, json=responses_body("   ")))

    assert asyncio.run(provider.generate("p")) == ""


@pytest.mark.parametrize(
    "body",
    [
        "not json at all",
        json.dumps({"output": []}),
        json.dumps({"output": [{"content": []}]}),
        json.dumps({"output": [{"content": [{"type": "refusal"}]}]}),
        json.dumps({"output": [{"content": [{"text": 42}]}]}),
        json.dumps({"error": "nope"}),
        json.dumps([1, 2, 3]),
    ],
)
def test_unexpected_body_degrades_to_raw(body):
    provider = make_provider(lambda request: httpx.Response(200, text=body))

    assert asyncio.run(provider.generate("p")) == body


def test_non_2xx_is_upstream_error():
    provider = make_provider(lambda request: httpx.Response(401, text='{"error": "bad key"}'))

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(provider.generate("p"))

    assert exc_info.value.status_code == 401
    assert "bad key" in str(exc_info.value)


def test_transport_failure_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(UpstreamError, match="connection refused") as exc_info:
        asyncio.run(provider.generate("p"))

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert exc_info.value.status_code is None


def test_availability_follows_api_key():
    handler = lambda request: httpx.Response(200)  # noqa: E731

    assert asyncio.run(make_provider(handler).is_available()) is True
    assert asyncio.run(make_provider(handler, api_key="").is_available()) is False


def test_close_releases_client():
    provider = make_provider(lambda request: httpx.Response(200, json=responses_body("x")))

    asyncio.run(provider.close())

    assert provider._client is None
