import json

import httpx
import pytest
from fastapi.testclient import TestClient

from convo_coach.config import Config
from convo_coach.main import app

MODEL_REPLY = (
    "[FEEDBACK]\nScore: 91\nTip: Ask a question back.\nSample: Pretty good, thanks! How about yours?\n[/FEEDBACK]\n"
    "[NEXT]\nNice! Any plans for the weekend?\n[/NEXT]"
)


class FakeUpstream:
    """Stands in for the LLM gateway and Whisper behind httpx.MockTransport."""

    def __init__(self, gateway_status: int = 200, reply: str = MODEL_REPLY,
                 whisper_status: int = 200, whisper_text: str = "pretty good thanks") -> None:
        self.gateway_status = gateway_status
        self.reply = reply
        self.whisper_status = whisper_status
        self.whisper_text = whisper_text
        self.gateway_requests: list[dict] = []
        self.whisper_requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/audio/transcriptions"):
            self.whisper_requests.append(request)
            if self.whisper_status != 200:
                return httpx.Response(self.whisper_status, text="bad audio")
            return httpx.Response(200, json={"text": self.whisper_text})

        self.gateway_requests.append(json.loads(request.content))
        if self.gateway_status != 200:
            return httpx.Response(self.gateway_status, json={"error": "upstream"})
        return httpx.Response(200, json={"choices": [{"message": {"content": self.reply}}]})


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(Config, "GATEWAY_API_KEY", "test-gateway-key")
    monkeypatch.setattr(Config, "OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setattr(Config, "EVAL_PROVIDER", "gateway")
    return Config


@pytest.fixture
def upstream(configured):
    fake = FakeUpstream()
    app.state.transport = httpx.MockTransport(fake)
    yield fake
    app.state.transport = None


@pytest.fixture
def api(upstream):
    return TestClient(app)
