import pytest
import requests

import ai_service
from ai_service import (
    NO_PROVIDER_MESSAGE,
    PARSE_FAILED_INSIGHT,
    analyze_content,
    extract_json_object,
    openai_completion,
    parse_analysis,
    resolve_completion_fn,
)
from errors import ProviderError


def test_no_provider_short_circuits(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no network call expected")

    monkeypatch.setattr(ai_service.requests, "post", fail)
    report = analyze_content("prompt", None)
    assert report == {"topics": {}, "tones": {}, "contentTypes": {}, "message": NO_PROVIDER_MESSAGE}


def test_extracts_embedded_object():
    report = analyze_content("prompt", lambda _: 'Here is the result: {"topics":{"X":1}} and more')
    assert report["topics"] == {"X": 1}
    assert report["tones"] == {}
    assert report["contentTypes"] == {}
    assert report["insights"] == []


def test_extract_json_object_ignores_braces_in_strings():
    text = 'prefix {"a": "}{", "b": {"c": 1}} {"second": true}'
    assert extract_json_object(text) == '{"a": "}{", "b": {"c": 1}}'
    assert extract_json_object("no json here") is None
    assert extract_json_object('{"open": 1') is None


def test_parse_failure_keeps_raw_text():
    report = parse_analysis("sorry, I cannot help with that")
    assert report["insights"] == [PARSE_FAILED_INSIGHT]
    assert report["rawResponse"] == "sorry, I cannot help with that"
    assert report["topics"] == {} and report["tones"] == {} and report["contentTypes"] == {}


def test_parse_preserves_topic_order_and_sanitizes_counts():
    raw = '{"topics": {"Zeta": 2, "Alpha": "3", "Bad": "many", "Neg": -1}, "insights": ["one", "", null, " two "]}'
    report = parse_analysis(raw)
    assert list(report["topics"].items()) == [("Zeta", 2), ("Alpha", 3)]
    assert report["insights"] == ["one", "two"]


def test_provider_error_degrades():
    def broken(prompt):
        raise ProviderError("OpenAI API error: 500 Internal Server Error")

    report = analyze_content("prompt", broken)
    assert report["topics"] == {}
    assert report["error"].startswith("AI analysis failed:")
    assert "500" in report["error"]


def test_unexpected_provider_exception_degrades():
    def broken(prompt):
        raise RuntimeError("socket closed")

    report = analyze_content("prompt", broken)
    assert "socket closed" in report["error"]


class _FakeResponse:
    def __init__(self, status_code, payload=None, reason="OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = reason
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


def test_openai_binding_reads_choice_message(monkeypatch):
    calls = []

    def fake_post(url, headers, json, timeout):
        calls.append((url, headers, json))
        return _FakeResponse(200, {"choices": [{"message": {"content": '{"topics": {}}'}}]})

    monkeypatch.setattr(ai_service.requests, "post", fake_post)
    text = openai_completion("sk-test", model="gpt-test")("hello")

    assert text == '{"topics": {}}'
    url, headers, body = calls[0]
    assert url == ai_service.OPENAI_CHAT_URL
    assert headers["Authorization"] == "Bearer sk-test"
    assert body["model"] == "gpt-test"
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"] == "hello"


def test_openai_binding_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(ai_service.requests, "post", lambda *a, **k: _FakeResponse(429, reason="Too Many Requests"))
    with pytest.raises(ProviderError, match="429"):
        openai_completion("sk-test")("hello")


def test_openai_binding_raises_on_transport_error(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(ai_service.requests, "post", fake_post)
    with pytest.raises(ProviderError):
        openai_completion("sk-test")("hello")


class _Block:
    def __init__(self, text):
        self.text = text


class _Message:
    def __init__(self, *texts):
        self.content = [_Block(t) for t in texts]


class _FakeAnthropic:
    last_kwargs: dict = {}

    def __init__(self, **kwargs):
        self.messages = self

    def create(self, **kwargs):
        _FakeAnthropic.last_kwargs = kwargs
        return _Message('{"tones": ', '{"casual": 4}}')


def test_anthropic_binding_joins_content_blocks(monkeypatch):
    monkeypatch.setattr(ai_service, "Anthropic", _FakeAnthropic)
    text = ai_service.anthropic_completion("key", model="claude-test")("hello")

    assert text == '{"tones": {"casual": 4}}'
    assert _FakeAnthropic.last_kwargs["messages"] == [{"role": "user", "content": "hello"}]
    assert _FakeAnthropic.last_kwargs["model"] == "claude-test"


def test_resolve_completion_fn_prefers_openai(monkeypatch):
    monkeypatch.setattr(ai_service, "Anthropic", _FakeAnthropic)
    assert resolve_completion_fn("", "") is None
    assert resolve_completion_fn("", "anthropic-key") is not None

    picked = []
    monkeypatch.setattr(ai_service, "openai_completion", lambda key: picked.append("openai") or (lambda p: ""))
    monkeypatch.setattr(ai_service, "anthropic_completion", lambda key: picked.append("anthropic") or (lambda p: ""))
    resolve_completion_fn("openai-key", "anthropic-key")
    assert picked == ["openai"]


@pytest.mark.parametrize("count", ["1e999", "-1e999", "Infinity", "NaN"])
def test_non_finite_counts_are_dropped(count):
    report = analyze_content("prompt", lambda _: '{"topics": {"A": %s, "B": 2}}' % count)
    assert report["topics"] == {"B": 2}
