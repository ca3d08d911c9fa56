"""HTTP client for the evaluation service, used by the session controller."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import requests

from convo_coach.models import Scenario, TurnResult


@dataclass
class ServiceError:
    """An ``{"error": ...}`` reply from the evaluation service."""
    status: int
    message: str


class PracticeClient:
    """Posts turns to ``/conversation-practice``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 120,
        http: Optional[requests.Session] = None,
    ):
        from convo_coach.config import Config
        self.base_url = (base_url or Config.PRACTICE_SERVICE_URL).rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def evaluate(self, payload: Dict[str, Any]) -> Union[TurnResult, ServiceError]:
        """Send one evaluation request.

        Raises:
            requests.RequestException: On network failure
        """
        response = self.http.post(
            f"{self.base_url}/conversation-practice",
            json=payload,
            timeout=self.timeout
        )
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400 or not isinstance(data, dict) or "error" in data:
            message = data.get("error", "") if isinstance(data, dict) else ""
            status = response.status_code if response.status_code >= 400 else 500
            return ServiceError(status=status, message=message)

        try:
            return TurnResult.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            print(f"[SESSION] Malformed reply from service: {e!r}")
            return ServiceError(status=500, message="")

    def scenarios(self) -> List[Scenario]:
        response = self.http.get(f"{self.base_url}/scenarios", timeout=self.timeout)
        response.raise_for_status()
        return [
            Scenario(
                id=s["id"],
                title=s["title"],
                description=s["description"],
                initial_prompt=s["initialPrompt"],
            )
            for s in response.json().get("scenarios", [])
        ]
