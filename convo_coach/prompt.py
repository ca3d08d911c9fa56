from __future__ import annotations
from typing import Dict, List, Sequence

from convo_coach.models import Message

DEFAULT_CURRENT_PROMPT = "How are you feeling today?"


def current_prompt(history: Sequence[Message]) -> str:
    """The prompt the user was answering: the last message in the history."""
    if not history:
        return DEFAULT_CURRENT_PROMPT
    return history[-1].content


def build_evaluation_messages(scenario: str, prompt: str, transcript: str) -> List[Dict[str, str]]:
    """
    Single prompt builder shared by all providers.
    The two-block output format here is what schema.parse_evaluation reads back.
    """
    system = f"""You are an AI language coach. A relocating professional is practicing a "{scenario}" scenario.

The scenario prompt given to the user was: "{prompt}"
The user's spoken response was: "{transcript}"

Your task is to evaluate this response and provide feedback.

1. Analyze the user's response for relevance, politeness, and naturalness.
2. Generate a relevance score from 0 to 100. (e.g., A simple "fine" is 60, "I'm good, how are you?" is 95).
3. Write a short improvement tip (max 2 sentences) that is encouraging and actionable.
4. Provide a "sample better reply" that demonstrates a more natural or professional way to respond.
5. Continue the conversation naturally with a follow-up question or statement.

Respond using EXACTLY this structure:

[FEEDBACK]
Score: [number 0-100]
Tip: [encouraging, actionable tip]
Sample: [better example response]
[/FEEDBACK]

[NEXT]
[Your natural conversational follow-up]
[/NEXT]"""

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": transcript},
    ]
