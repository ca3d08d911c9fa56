"""Practice session state and the turn loop that drives it.

The module functions are pure turn-advance steps over a ``PracticeSession``;
``SessionController`` is the I/O shell that calls the evaluation service
between them.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

from convo_coach.errors import MicrophoneError
from convo_coach.models import Feedback, Message, Scenario, TurnResult

AUDIO_PLACEHOLDER = "[Audio response]"
CELEBRATION_THRESHOLD = 80
INPUT_MODES = ("type", "speak")

# Notice kinds
RATE_LIMIT = "rate_limit"
PAYMENT_REQUIRED = "payment_required"
GENERIC = "generic"
MICROPHONE = "microphone"

RATE_LIMIT_NOTICE = "Too many requests. Please wait a moment and try again."
PAYMENT_REQUIRED_NOTICE = "AI service requires credits. Please add credits to your workspace."
GENERIC_NOTICE = "Something went wrong. Please try again."


class ScenarioRequiredError(ValueError):
    """No scenario was chosen; the caller should return to the scenario list."""


class TurnInProgressError(RuntimeError):
    """A turn was submitted while another one is still awaiting its reply."""


@dataclass
class Notice:
    kind: str
    message: str


@dataclass
class PracticeSession:
    scenario: Scenario
    messages: List[Message] = field(default_factory=list)
    input_mode: str = "type"
    feedback: Optional[Feedback] = None
    previous_score: Optional[int] = None
    is_loading: bool = False


def select_scenario(scenario: Optional[Scenario]) -> PracticeSession:
    if scenario is None:
        raise ScenarioRequiredError("No scenario selected")
    return PracticeSession(
        scenario=scenario,
        messages=[Message(role="assistant", content=scenario.initial_prompt)],
    )


def begin_turn(session: PracticeSession, content: Optional[str], is_audio: bool = False) -> Optional[Dict[str, Any]]:
    """Append the user's message and build the evaluation request.

    Returns None (and leaves the session untouched) for blank input.
    """
    if not content or not content.strip():
        return None
    if session.is_loading:
        raise TurnInProgressError("A turn is already being evaluated")

    # History is the conversation as it stood before this reply
    history = [m.to_dict() for m in session.messages]
    session.messages.append(
        Message(role="user", content=AUDIO_PLACEHOLDER if is_audio else content)
    )
    session.is_loading = True
    return {
        "scenario": session.scenario.title,
        "userResponse": content,
        "isAudio": is_audio,
        "conversationHistory": history,
    }


def should_celebrate(previous_score: Optional[int], new_score: int) -> bool:
    return (
        previous_score is not None
        and new_score > previous_score
        and new_score >= CELEBRATION_THRESHOLD
    )


def complete_turn(session: PracticeSession, result: TurnResult) -> bool:
    """Store feedback and the assistant's follow-up. Returns True to celebrate."""
    celebrate = should_celebrate(session.previous_score, result.feedback.score)
    session.previous_score = result.feedback.score
    session.feedback = result.feedback
    session.messages.append(Message(role="assistant", content=result.next_prompt))
    session.is_loading = False
    return celebrate


def notice_for(status: Optional[int], message: str = "") -> Notice:
    if status == 429:
        return Notice(RATE_LIMIT, RATE_LIMIT_NOTICE)
    if status == 402:
        return Notice(PAYMENT_REQUIRED, PAYMENT_REQUIRED_NOTICE)
    return Notice(GENERIC, message or GENERIC_NOTICE)


def fail_turn(session: PracticeSession, status: Optional[int], message: str = "") -> Notice:
    """End a failed turn. The user's message stays; no assistant reply is added."""
    session.is_loading = False
    return notice_for(status, message)


def retry_last_turn(session: PracticeSession) -> bool:
    """Drop the latest user/assistant pair and the feedback that went with it."""
    removed = False
    if len(session.messages) >= 2:
        del session.messages[-2:]
        removed = True
    session.feedback = None
    return removed


class SessionController:
    """Runs a practice session against the evaluation service."""

    def __init__(
        self,
        scenario: Optional[Scenario],
        client,
        on_celebrate: Optional[Callable[[Feedback], None]] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self.session = select_scenario(scenario)
        self.client = client
        self.on_celebrate = on_celebrate
        self.on_notice = on_notice

    @property
    def messages(self) -> List[Message]:
        return self.session.messages

    @property
    def feedback(self) -> Optional[Feedback]:
        return self.session.feedback

    @property
    def can_submit(self) -> bool:
        return not self.session.is_loading

    def set_input_mode(self, mode: str):
        if mode not in INPUT_MODES:
            raise ValueError(f"Unknown input mode '{mode}'. Valid: {', '.join(INPUT_MODES)}")
        self.session.input_mode = mode

    def _notify(self, notice: Notice):
        print(f"[SESSION] {notice.kind}: {notice.message}")
        if self.on_notice is not None:
            self.on_notice(notice)

    def submit_turn(self, content: Optional[str], is_audio: bool = False) -> Optional[TurnResult]:
        """Submit one reply. Returns the result, or None if nothing was applied."""
        if not self.can_submit:
            print("[SESSION] Submission blocked: a turn is already in flight")
            return None

        payload = begin_turn(self.session, content, is_audio)
        if payload is None:
            return None

        try:
            reply = self.client.evaluate(payload)
        except requests.RequestException as e:
            print(f"[SESSION] Request failed: {e}")
            self._notify(fail_turn(self.session, None))
            return None
        except Exception:
            self.session.is_loading = False
            raise

        if not isinstance(reply, TurnResult):
            self._notify(fail_turn(self.session, reply.status, reply.message))
            return None

        if complete_turn(self.session, reply) and self.on_celebrate is not None:
            self.on_celebrate(reply.feedback)
        return reply

    def retry_last_turn(self) -> bool:
        return retry_last_turn(self.session)

    def record_turn(self, recorder, wait_for_stop: Callable[[], Any]) -> Optional[TurnResult]:
        """Record until ``wait_for_stop`` returns, then submit the audio."""
        if not self.can_submit:
            return None
        try:
            with recorder.recording():
                wait_for_stop()
                payload = recorder.stop()
        except MicrophoneError as e:
            self._notify(Notice(MICROPHONE, e.message))
            return None
        return self.submit_turn(payload, is_audio=True)
