from __future__ import annotations
import httpx
from typing import Dict, List, Optional

from convo_coach.config import Config
from convo_coach.errors import ConfigurationError, GatewayError, raise_for_gateway_status


async def generate(
    messages: List[Dict[str, str]],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    OpenAI-compatible chat completions gateway (default provider).
    Returns the raw text of the first choice.
    """
    api_key = (Config.GATEWAY_API_KEY or "").strip()
    if not api_key:
        raise ConfigurationError("GATEWAY_API_KEY is not configured")

    url = f"{Config.GATEWAY_URL.rstrip('/')}/v1/chat/completions"
    body = {
        "model": Config.GATEWAY_MODEL,
        "messages": messages,
        "temperature": Config.GATEWAY_TEMPERATURE,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    async with httpx.AsyncClient(timeout=90, transport=transport) as client:
        r = await client.post(url, json=body, headers=headers)
        raise_for_gateway_status(r.status_code, r.text)
        data = r.json()

    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        print(f"[GATEWAY] unexpected response shape: {str(data)[:200]}")
        raise GatewayError()
