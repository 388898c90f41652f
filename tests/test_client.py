"""Tests for llm/client.py, with the HTTP layer patched out."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from innergarden.llm.client import ChatAPIError, ChatClient
from innergarden.llm.config import ModelConfig


def _response(status_code=200, content="{}", text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.headers = {}
    resp.json.return_value = {"choices": [{"message": {"content": content}}]}
    return resp


@pytest.fixture
def client():
    return ChatClient(base_url="http://localhost:11434/v1", model="llama3.1:8b", max_retries=2)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("innergarden.llm.client.time.sleep") as sleep:
        yield sleep


class TestChatCompletion:
    def test_returns_message_content(self, client):
        with patch("innergarden.llm.client.requests.post", return_value=_response(content="hi")) as post:
            assert client.chat_completion([{"role": "user", "content": "hello"}]) == "hi"
        url = post.call_args.args[0]
        body = post.call_args.kwargs["json"]
        assert url == "http://localhost:11434/v1/chat/completions"
        assert body["model"] == "llama3.1:8b"
        assert "response_format" not in body

    def test_api_key_sets_bearer_header(self):
        client = ChatClient(base_url="http://x", model="m", api_key="secret")
        with patch("innergarden.llm.client.requests.post", return_value=_response()) as post:
            client.chat_completion([])
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_client_error_fails_immediately(self, client):
        with patch("innergarden.llm.client.requests.post",
                   return_value=_response(400, text="bad request")) as post:
            with pytest.raises(ChatAPIError) as exc:
                client.chat_completion([])
        assert exc.value.status_code == 400
        assert post.call_count == 1

    def test_server_error_is_retried(self, client, no_sleep):
        responses = [_response(503, text="busy"), _response(content="ok")]
        with patch("innergarden.llm.client.requests.post", side_effect=responses) as post:
            assert client.chat_completion([]) == "ok"
        assert post.call_count == 2
        no_sleep.assert_called_once_with(1)

    def test_timeouts_exhaust_retries(self, client, no_sleep):
        with patch("innergarden.llm.client.requests.post",
                   side_effect=requests.exceptions.Timeout()) as post:
            with pytest.raises(ChatAPIError) as exc:
                client.chat_completion([])
        assert exc.value.status_code == 408
        assert post.call_count == 3
        assert [c.args[0] for c in no_sleep.call_args_list] == [1, 2]

    def test_connection_error_maps_to_status_zero(self, client):
        with patch("innergarden.llm.client.requests.post",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(ChatAPIError) as exc:
                client.chat_completion([])
        assert exc.value.status_code == 0


class TestPing:
    def test_ok(self, client):
        with patch("innergarden.llm.client.requests.get", return_value=_response()) as get:
            client.ping()
        assert get.call_args.args[0] == "http://localhost:11434/v1/models"

    def test_unreachable(self, client):
        with patch("innergarden.llm.client.requests.get",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(ChatAPIError):
                client.ping()


def test_from_config_uses_chat_settings():
    config = ModelConfig(chat_base_url="http://gpu:8000/v1", chat_model="qwen", classify_timeout=5.0)
    client = ChatClient.from_config(config)
    assert client.base_url == "http://gpu:8000/v1"
    assert client.model == "qwen"
    assert client.timeout == 5.0
