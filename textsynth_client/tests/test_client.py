"""HTTP-level tests for ``TextSynthClient`` using ``httpx.MockTransport``."""
from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from textsynth_client import (
    ApiError,
    CompletionEngine,
    CompletionRequest,
    DecodeError,
    ErrorCode,
    RequestValidationError,
    TextSynthClient,
    TextSynthError,
    TransportError,
    TranslationEngine,
)
from textsynth_client.tests.streaming.helpers import AB_STREAM, RecordingStream

API_KEY = "sk-unit-key"


class Recorder:
    """MockTransport handler that records requests and answers via ``respond``."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


def _client(handler, **kwargs) -> TextSynthClient:
    return TextSynthClient(API_KEY, transport=httpx.MockTransport(handler), **kwargs)


def _json(status: int, body) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status, json=body)


@pytest.mark.asyncio
async def test_completions_stream_posts_to_engine_path_with_bearer():
    rec = Recorder(lambda r: httpx.Response(200, stream=RecordingStream([AB_STREAM[:7], AB_STREAM[7:]])))
    async with _client(rec) as client:
        stream = await client.completions(
            CompletionEngine.GPTJ_6B, CompletionRequest.build(prompt="Hi", stream=True)
        )
        async with stream:
            chunks = [event.unwrap() async for event in stream]
    req = rec.requests[0]
    assert req.method == "POST"  # nosec B101
    assert req.url == httpx.URL("https://api.textsynth.com/v1/engines/gptj_6B/completions")  # nosec B101
    assert req.headers["authorization"] == f"Bearer {API_KEY}"  # nosec B101
    assert rec.last_json == {"prompt": "Hi", "stream": True}  # nosec B101
    assert [c.text for c in chunks] == [["a"], ["b"]]  # nosec B101
    assert chunks[-1].reached_end  # nosec B101


@pytest.mark.asyncio
async def test_complete_accumulates_non_streamed_answer():
    body = {"text": "Hello world", "reached_end": True, "input_tokens": 1, "output_tokens": 2}
    rec = Recorder(_json(200, body))
    async with _client(rec) as client:
        result = await client.complete("boris_6B", {"prompt": "x", "max_tokens": 2})
    assert result.text == ["Hello world"]  # nosec B101
    assert result.output_tokens == 2  # nosec B101
    assert rec.requests[0].url.path == "/v1/engines/boris_6B/completions"  # nosec B101


@pytest.mark.asyncio
async def test_complete_raises_terminal_stream_error():
    rec = Recorder(lambda r: httpx.Response(200, content=b'{"text":"a","reached_end":false}{"te'))
    async with _client(rec) as client:
        with pytest.raises(TextSynthError) as exc:
            await client.complete(CompletionEngine.GPTNEOX_20B, {"prompt": "x"})
    assert exc.value.code is ErrorCode.DANGLING_DATA  # nosec B101
    assert exc.value.engine == "gptneox_20B"  # nosec B101


@pytest.mark.asyncio
async def test_early_close_releases_http_response():
    body = RecordingStream([AB_STREAM, AB_STREAM])
    async with _client(lambda r: httpx.Response(200, stream=body)) as client:
        stream = await client.completions(CompletionEngine.GPTJ_6B, {"prompt": "x", "stream": True})
        await stream.__anext__()
        await stream.aclose()
    assert body.closed  # nosec B101
    assert stream.response.is_closed  # nosec B101


@pytest.mark.asyncio
async def test_invalid_request_mapping_sends_nothing():
    rec = Recorder(_json(200, {}))
    async with _client(rec) as client:
        with pytest.raises(RequestValidationError):
            await client.completions(CompletionEngine.GPTJ_6B, {"prompt": "x", "n": 20})
    assert rec.requests == []  # nosec B101


@pytest.mark.asyncio
async def test_wrong_capability_engine_rejected_before_request():
    rec = Recorder(_json(200, {}))
    async with _client(rec) as client:
        with pytest.raises(TextSynthError) as exc:
            await client.completions(TranslationEngine.M2M100_1_2B, {"prompt": "x"})
        assert exc.value.code is ErrorCode.UNSUPPORTED  # nosec B101
        with pytest.raises(TextSynthError) as exc:
            await client.translate(
                CompletionEngine.GPTJ_6B, {"text": ["a"], "source_lang": "en", "target_lang": "fr"}
            )
        assert exc.value.code is ErrorCode.UNSUPPORTED  # nosec B101
        with pytest.raises(TextSynthError):
            await client.logprob("not_an_engine", {"context": "a", "continuation": "b"})
    assert rec.requests == []  # nosec B101


@pytest.mark.asyncio
async def test_api_error_status_raises_from_completions():
    rec = Recorder(_json(401, {"error": "invalid API key"}))
    async with _client(rec) as client:
        with pytest.raises(ApiError) as exc:
            await client.completions(CompletionEngine.GPTJ_6B, {"prompt": "x"})
    err = exc.value
    assert err.status_code == 401  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert "invalid API key" in err.message  # nosec B101
    assert not err.retryable  # nosec B101


@pytest.mark.asyncio
async def test_rate_limit_is_retryable_hint():
    async with _client(_json(429, {"error": "slow down"})) as client:
        with pytest.raises(ApiError) as exc:
            await client.tokenize(CompletionEngine.GPTJ_6B, {"text": "x"})
    assert exc.value.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert exc.value.retryable  # nosec B101


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    async with _client(boom) as client:
        with pytest.raises(TransportError) as exc:
            await client.completions(CompletionEngine.GPTJ_6B, {"prompt": "x"})
    assert exc.value.code is ErrorCode.TRANSPORT  # nosec B101


@pytest.mark.asyncio
async def test_logprob_round_trip():
    rec = Recorder(_json(200, {"logprob": -0.25, "is_greedy": False, "input_tokens": 5}))
    async with _client(rec) as client:
        resp = await client.logprob(
            CompletionEngine.FAIRSEQ_GPT_13B, {"context": "The quick", "continuation": " brown"}
        )
    assert resp.logprob == -0.25  # nosec B101
    assert rec.requests[0].url.path == "/v1/engines/fairseq_gpt_13B/logprob"  # nosec B101
    assert rec.last_json == {"context": "The quick", "continuation": " brown"}  # nosec B101


@pytest.mark.asyncio
async def test_tokenize_and_translate():
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/tokenize"):
            return httpx.Response(200, json={"tokens": [1, 2, 3]})
        return httpx.Response(
            200,
            json={"translations": [{"text": "Bonjour", "detected_source_lang": "en"}]},
        )

    rec = Recorder(respond)
    async with _client(rec) as client:
        tokens = await client.tokenize(TranslationEngine.M2M100_1_2B, {"text": "Hello"})
        translated = await client.translate(
            TranslationEngine.M2M100_1_2B,
            {"text": ["Hello"], "source_lang": "auto", "target_lang": "fr"},
        )
    assert tokens.tokens == [1, 2, 3]  # nosec B101
    assert translated.translations[0].text == "Bonjour"  # nosec B101
    assert rec.requests[1].url.path == "/v1/engines/m2m100_1_2B/translate"  # nosec B101


@pytest.mark.asyncio
async def test_bad_one_shot_body_raises_decode_error():
    async with _client(_json(200, {"tokens": "nope"})) as client:
        with pytest.raises(DecodeError):
            await client.tokenize(CompletionEngine.GPTJ_6B, {"text": "x"})


@pytest.mark.asyncio
async def test_request_events_are_logged(log_events):
    async with _client(_json(404, {"error": "unknown engine"})) as client:
        with pytest.raises(ApiError):
            await client.tokenize(CompletionEngine.GPTJ_6B, {"text": "x"})
        assert log_events.named("request.start")[0]["operation"] == "tokenize"  # nosec B101
        error = log_events.named("request.error")[0]
        assert error["error_code"] == "not_found"  # nosec B101


def test_missing_api_key_raises_auth():
    with pytest.raises(TextSynthError) as exc:
        TextSynthClient()
    assert exc.value.code is ErrorCode.AUTH  # nosec B101


@pytest.mark.asyncio
async def test_api_key_and_base_url_from_env(monkeypatch):
    monkeypatch.setenv("TEXT_SYNTH_API_KEY", "sk-from-env")
    monkeypatch.setenv("TEXTSYNTH_BASE_URL", "http://localhost:8080/v1")
    rec = Recorder(_json(200, {"tokens": []}))
    client = TextSynthClient(transport=httpx.MockTransport(rec))
    await client.tokenize(CompletionEngine.GPTJ_6B, {"text": ""})
    await client.aclose()
    assert client.is_closed  # nosec B101
    assert str(rec.requests[0].url) == "http://localhost:8080/v1/engines/gptj_6B/tokenize"  # nosec B101
    assert rec.requests[0].headers["authorization"] == "Bearer sk-from-env"  # nosec B101
