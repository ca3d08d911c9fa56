from __future__ import annotations

from convo_coach import cli
from convo_coach.client import ServiceError
from convo_coach.models import Feedback, TurnResult


class StubClient:
    def __init__(self, base_url=None) -> None:
        self.replies = [
            TurnResult(Feedback("Good, thanks", 82, "Ask back.", "Good, and you?"), "Glad to hear it!"),
            ServiceError(429, ""),
        ]

    def evaluate(self, payload: dict):
        return self.replies.pop(0)


def test_unknown_scenario_lists_choices(capsys) -> None:
    assert cli.main(["practice", "--scenario", "nope"]) == 2

    out = capsys.readouterr().out
    assert "small-talk" in out and "responding-question" in out


def test_practice_loop_prints_feedback_and_notices(monkeypatch, capsys) -> None:
    monkeypatch.setattr("convo_coach.client.PracticeClient", StubClient)
    lines = iter(["Good, thanks", "again", "/retry", "/quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    assert cli.main(["practice", "--scenario", "small-talk"]) == 0

    out = capsys.readouterr().out
    assert "Score: 82% (excellent)" in out
    assert "Coach: Glad to hear it!" in out
    assert "! Too many requests. Please wait a moment and try again." in out


class FailingClient:
    def __init__(self, base_url=None) -> None:
        pass

    def evaluate(self, payload: dict):
        return ServiceError(500, "AI gateway error")


def test_retry_after_failed_first_turn_shows_opening_prompt(monkeypatch, capsys) -> None:
    monkeypatch.setattr("convo_coach.client.PracticeClient", FailingClient)
    lines = iter(["hello", "/retry", "/quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    assert cli.main(["practice", "--scenario", "small-talk"]) == 0

    out = capsys.readouterr().out
    assert "! AI gateway error" in out
    assert out.count("Coach: Hey! How's your week going so far?") == 2
