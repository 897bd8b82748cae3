"""Tests for the JSON-mode completion client (mocked OpenAI)."""

import inspect
import json
from unittest.mock import MagicMock, patch

import pytest
from openai import OpenAIError

from llm.client import LLMClient, LLMError, extract_json


def _response(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    resp = MagicMock()
    resp.choices = [choice]
    return resp


@pytest.fixture(autouse=True)
def no_rate_limit():
    with patch("llm.client._MIN_INTERVAL", 0):
        yield


def test_extract_json_direct():
    assert extract_json('{"groups": []}') == {"groups": []}
    assert extract_json("[1, 2]") == [1, 2]


def test_extract_json_from_markdown():
    assert extract_json('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}


def test_extract_json_from_prose():
    assert extract_json('Sure! {"headline": "H"} Hope that helps.') == {"headline": "H"}


def test_extract_json_failure():
    with pytest.raises(json.JSONDecodeError):
        extract_json("no json here")


def test_complete_json_request_shape():
    openai_client = MagicMock()
    openai_client.chat.completions.create.return_value = _response('{"ok": true}')
    llm = LLMClient(model="test-model", client=openai_client)

    assert llm.complete_json("sys", "user", max_tokens=123) == {"ok": True}
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "user"},
    ]
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["max_completion_tokens"] == 123


@pytest.mark.parametrize("content", [None, "", "   ", "not json"])
def test_unusable_content_raises(content):
    openai_client = MagicMock()
    openai_client.chat.completions.create.return_value = _response(content)
    with pytest.raises(LLMError):
        LLMClient(client=openai_client).complete_json("s", "u", max_tokens=10)


def test_api_error_raises_llm_error():
    openai_client = MagicMock()
    openai_client.chat.completions.create.side_effect = OpenAIError("rate limited")
    with pytest.raises(LLMError, match="rate limited"):
        LLMClient(client=openai_client).complete_json("s", "u", max_tokens=10)


def test_installed_sdk_accepts_max_completion_tokens():
    from openai.resources.chat.completions import Completions

    assert "max_completion_tokens" in inspect.signature(Completions.create).parameters
