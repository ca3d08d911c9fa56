"""Data models for the conversation practice coach."""

from dataclasses import dataclass
from typing import Any, Dict, Literal


@dataclass
class Message:
    """A single entry of the practice conversation."""
    role: Literal["assistant", "user"]
    content: str

    def to_dict(self):
        return {
            "role": self.role,
            "content": self.content
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(role=data["role"], content=data["content"])


@dataclass(frozen=True)
class Scenario:
    """A named conversational context with a fixed opening prompt."""
    id: str
    title: str
    description: str
    initial_prompt: str

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "initialPrompt": self.initial_prompt
        }


@dataclass
class Feedback:
    """Evaluation of one user turn."""
    transcript: str
    score: int  # 0-100
    tip: str
    sample_reply: str

    def to_dict(self):
        return {
            "transcript": self.transcript,
            "score": self.score,
            "tip": self.tip,
            "sampleReply": self.sample_reply
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feedback":
        return cls(
            transcript=data.get("transcript", ""),
            score=int(data["score"]),
            tip=data.get("tip", ""),
            sample_reply=data.get("sampleReply", "")
        )


@dataclass
class TurnResult:
    """Feedback plus the assistant's follow-up for one turn."""
    feedback: Feedback
    next_prompt: str

    def to_dict(self):
        return {
            "feedback": self.feedback.to_dict(),
            "nextPrompt": self.next_prompt,
            "success": True
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurnResult":
        return cls(
            feedback=Feedback.from_dict(data["feedback"]),
            next_prompt=data["nextPrompt"]
        )


def score_band(score: int) -> str:
    """Display band for a relevance score."""
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    return "needs-improvement"
