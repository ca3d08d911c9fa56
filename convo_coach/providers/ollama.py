from __future__ import annotations
import httpx
from typing import Dict, List, Optional

from convo_coach.config import Config
from convo_coach.errors import raise_for_gateway_status


async def generate(
    messages: List[Dict[str, str]],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    base_url = Config.OLLAMA_URL.rstrip("/")
    payload = {
        "model": Config.OLLAMA_MODEL,
        "messages": messages,
        "stream": False,
    }

    async with httpx.AsyncClient(timeout=90, transport=transport) as client:
        r = await client.post(f"{base_url}/api/chat", json=payload)
        raise_for_gateway_status(r.status_code, r.text)
        data = r.json()

    return (data.get("message") or {}).get("content", "") or ""
