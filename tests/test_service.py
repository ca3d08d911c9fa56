import base64

from convo_coach.config import Config
from convo_coach.main import app

HISTORY = [{"role": "assistant", "content": "Hey! How's your week going so far?"}]


def _turn(**overrides) -> dict:
    body = {
        "scenario": "Small Talk with a Colleague",
        "userResponse": "Pretty good, thanks.",
        "isAudio": False,
        "conversationHistory": HISTORY,
    }
    body.update(overrides)
    return body


def test_text_turn_returns_feedback_and_next_prompt(api, upstream) -> None:
    response = api.post("/conversation-practice", json=_turn())

    assert response.status_code == 200
    assert response.json() == {
        "feedback": {
            "transcript": "Pretty good, thanks.",
            "score": 91,
            "tip": "Ask a question back.",
            "sampleReply": "Pretty good, thanks! How about yours?",
        },
        "nextPrompt": "Nice! Any plans for the weekend?",
        "success": True,
    }
    assert upstream.whisper_requests == []


def test_gateway_request_carries_scenario_prompt_and_transcript(api, upstream) -> None:
    api.post("/conversation-practice", json=_turn())

    sent = upstream.gateway_requests[0]
    assert sent["model"] == Config.GATEWAY_MODEL
    assert sent["temperature"] == 0.7
    system, user = sent["messages"]
    assert system["role"] == "system"
    assert '"Small Talk with a Colleague"' in system["content"]
    assert "How's your week going so far?" in system["content"]
    assert "[FEEDBACK]" in system["content"] and "[NEXT]" in system["content"]
    assert user == {"role": "user", "content": "Pretty good, thanks."}


def test_empty_history_uses_default_current_prompt(api, upstream) -> None:
    api.post("/conversation-practice", json=_turn(conversationHistory=[]))

    assert "How are you feeling today?" in upstream.gateway_requests[0]["messages"][0]["content"]


def test_audio_turn_is_transcribed_first(api, upstream) -> None:
    audio = "data:audio/wav;base64," + base64.b64encode(b"RIFF-fake-audio").decode()

    response = api.post("/conversation-practice", json=_turn(userResponse=audio, isAudio=True))

    assert response.status_code == 200
    assert response.json()["feedback"]["transcript"] == "pretty good thanks"
    whisper = upstream.whisper_requests[0]
    assert whisper.headers["authorization"] == "Bearer test-openai-key"
    assert b"whisper-1" in whisper.content
    assert b'filename="audio.wav"' in whisper.content
    assert b"RIFF-fake-audio" in whisper.content
    assert upstream.gateway_requests[0]["messages"][1]["content"] == "pretty good thanks"


def test_transcription_failure_is_generic_error(api, upstream) -> None:
    upstream.whisper_status = 400
    audio = base64.b64encode(b"not really audio").decode()

    response = api.post("/conversation-practice", json=_turn(userResponse=audio, isAudio=True))

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to transcribe audio"}
    assert upstream.gateway_requests == []


def test_audio_turn_without_transcription_key_fails(api, upstream, monkeypatch) -> None:
    monkeypatch.setattr(Config, "OPENAI_API_KEY", None)
    audio = base64.b64encode(b"audio").decode()

    response = api.post("/conversation-practice", json=_turn(userResponse=audio, isAudio=True))

    assert response.status_code == 500
    assert response.json() == {"error": "Audio transcription is not configured"}


def test_rate_limit_is_passed_through(api, upstream) -> None:
    upstream.gateway_status = 429

    response = api.post("/conversation-practice", json=_turn())

    assert response.status_code == 429
    assert response.json() == {"error": "Rate limit exceeded. Please try again in a moment."}


def test_payment_required_is_passed_through(api, upstream) -> None:
    upstream.gateway_status = 402

    response = api.post("/conversation-practice", json=_turn())

    assert response.status_code == 402
    assert response.json() == {"error": "Payment required. Please add credits to your workspace."}


def test_other_gateway_failures_are_500(api, upstream) -> None:
    upstream.gateway_status = 503

    response = api.post("/conversation-practice", json=_turn())

    assert response.status_code == 500
    assert response.json() == {"error": "AI gateway error"}


def test_missing_gateway_key_is_500(api, monkeypatch) -> None:
    monkeypatch.setattr(Config, "GATEWAY_API_KEY", None)

    response = api.post("/conversation-practice", json=_turn())

    assert response.status_code == 500
    assert response.json() == {"error": "GATEWAY_API_KEY is not configured"}


def test_unstructured_model_output_still_completes(api, upstream) -> None:
    upstream.reply = "What did you do last weekend?"

    response = api.post("/conversation-practice", json=_turn())

    body = response.json()
    assert response.status_code == 200
    assert body["feedback"]["score"] == 75
    assert body["nextPrompt"] == "What did you do last weekend?"


def test_malformed_body_is_500(api) -> None:
    response = api.post("/conversation-practice", json={"scenario": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "Invalid request payload"}


def test_scenarios_are_listed(api) -> None:
    response = api.get("/scenarios")

    ids = [s["id"] for s in response.json()["scenarios"]]
    assert ids == ["small-talk", "explaining-task", "responding-question"]
    assert response.json()["scenarios"][0]["initialPrompt"] == "Hey! How's your week going so far?"


def test_health_reports_missing_gateway_key(monkeypatch) -> None:
    from fastapi.testclient import TestClient

    monkeypatch.setattr(Config, "GATEWAY_API_KEY", None)
    monkeypatch.setattr(Config, "EVAL_PROVIDER", "gateway")

    body = TestClient(app).get("/health").json()

    assert body["status"] == "degraded"
    assert any("GATEWAY_API_KEY" in m for m in body["missing"])
