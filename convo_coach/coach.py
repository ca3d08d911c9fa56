from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

import httpx

from convo_coach.config import Config
from convo_coach.errors import ConfigurationError
from convo_coach.models import Message, TurnResult
from convo_coach.prompt import build_evaluation_messages, current_prompt
from convo_coach.providers import gateway as gateway_provider
from convo_coach.providers import ollama as ollama_provider
from convo_coach.schema import parse_evaluation
from convo_coach.transcriber import Transcriber, WhisperTranscriber, decode_audio_payload

ProviderFn = Callable[..., Awaitable[str]]

# Provider registry
PROVIDERS: Dict[str, ProviderFn] = {
    "gateway": gateway_provider.generate,
    "ollama": ollama_provider.generate,
}


def _get_provider_name() -> str:
    return (Config.EVAL_PROVIDER or "gateway").strip().lower()


async def evaluate_turn(
    scenario: str,
    user_response: str,
    is_audio: bool,
    history: Sequence[Message],
    *,
    transcriber: Optional[Transcriber] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TurnResult:
    """
    Run one practice turn: transcribe (audio only), evaluate, parse.

    Stateless: everything needed comes from the arguments. Raises a
    PracticeError subclass for failures the caller reports as error payloads.
    """
    provider_name = _get_provider_name()
    provider: Optional[ProviderFn] = PROVIDERS.get(provider_name)
    if provider is None:
        raise ConfigurationError(
            f"Unknown provider '{provider_name}'. Valid: {', '.join(PROVIDERS.keys())}"
        )
    if provider_name == "gateway" and not Config.GATEWAY_API_KEY:
        raise ConfigurationError("GATEWAY_API_KEY is not configured")

    transcript = user_response
    if is_audio:
        audio, mime_type = decode_audio_payload(user_response)
        if transcriber is None:
            transcriber = WhisperTranscriber(transport=transport)
        transcript = await transcriber.transcribe(audio, mime_type)

    prompt = current_prompt(history)
    messages = build_evaluation_messages(scenario, prompt, transcript)

    raw = await provider(messages, transport=transport)
    print(f"[EVAL] {provider_name} response received: {raw[:200]}")

    return parse_evaluation(raw, transcript)


def history_from_payload(items: Sequence[Any]) -> list:
    """Accept message dicts or objects with role/content attributes."""
    history = []
    for item in items or []:
        if isinstance(item, Message):
            history.append(item)
        elif isinstance(item, dict):
            history.append(Message.from_dict(item))
        else:
            history.append(Message(role=item.role, content=item.content))
    return history
