from __future__ import annotations
from typing import Any, Dict
import re

from convo_coach.models import Feedback, TurnResult

DEFAULT_SCORE = 75
DEFAULT_TIP = "Great response! Keep practicing to build confidence."
DEFAULT_SAMPLE = "That's a good point. Let me think about how to approach that."
DEFAULT_NEXT_PROMPT = "That's interesting! Could you tell me more about that?"

FEEDBACK_BLOCK_RE = re.compile(r"\[FEEDBACK\](.*?)\[/FEEDBACK\]", re.S)
NEXT_BLOCK_RE = re.compile(r"\[NEXT\](.*?)\[/NEXT\]", re.S)
SCORE_RE = re.compile(r"Score:\s*([-+]?\d+)", re.I)
TIP_RE = re.compile(r"Tip:\s*(.+?)(?=Sample:|\Z)", re.I | re.S)
SAMPLE_RE = re.compile(r"Sample:\s*(.+?)\Z", re.I | re.S)


def clamp_score(value: int) -> int:
    return min(100, max(0, value))


def parse_feedback_block(text: str) -> Dict[str, Any]:
    """
    Pull score/tip/sample out of the [FEEDBACK] block.
    Only the fields that were found are returned; a missing block gives {}.
    """
    if not text:
        return {}
    block = FEEDBACK_BLOCK_RE.search(text)
    if not block:
        return {}

    body = block.group(1).strip()
    out: Dict[str, Any] = {}

    score = SCORE_RE.search(body)
    if score:
        out["score"] = clamp_score(int(score.group(1)))
    tip = TIP_RE.search(body)
    if tip:
        out["tip"] = tip.group(1).strip()
    sample = SAMPLE_RE.search(body)
    if sample:
        out["sample_reply"] = sample.group(1).strip()
    return out


def parse_next_prompt(text: str) -> str:
    """
    Text inside [NEXT]...[/NEXT], else the whole output, else a generic follow-up.
    """
    text = text or ""
    block = NEXT_BLOCK_RE.search(text)
    prompt = block.group(1).strip() if block else text.strip()
    return prompt or DEFAULT_NEXT_PROMPT


def parse_evaluation(text: str, transcript: str) -> TurnResult:
    """
    Normalize free-form model output into a complete TurnResult.
    Never raises on malformed output: anything missing falls back to defaults.
    """
    fields = parse_feedback_block(text)
    feedback = Feedback(
        transcript=transcript,
        score=fields.get("score", DEFAULT_SCORE),
        tip=fields.get("tip", DEFAULT_TIP),
        sample_reply=fields.get("sample_reply", DEFAULT_SAMPLE),
    )
    return TurnResult(feedback=feedback, next_prompt=parse_next_prompt(text))
