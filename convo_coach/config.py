"""Configuration management for API keys and settings."""

import os
from typing import List, Optional
from pathlib import Path

from dotenv import load_dotenv

# config.py is in convo_coach/, .env is in project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Config:
    """Application configuration from environment variables."""

    # LLM gateway (required when EVAL_PROVIDER=gateway)
    GATEWAY_API_KEY: Optional[str] = os.getenv("GATEWAY_API_KEY")
    GATEWAY_URL: str = os.getenv("GATEWAY_URL", "https://ai.gateway.lovable.dev")
    GATEWAY_MODEL: str = os.getenv("GATEWAY_MODEL", "google/gemini-2.5-flash")
    GATEWAY_TEMPERATURE: float = float(os.getenv("GATEWAY_TEMPERATURE", "0.7"))

    # Whisper transcription (optional, only needed for spoken turns)
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    TRANSCRIPTION_URL: str = os.getenv(
        "TRANSCRIPTION_URL", "https://api.openai.com/v1/audio/transcriptions"
    )
    TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")

    # Evaluation provider: "gateway" or "ollama"
    EVAL_PROVIDER: str = os.getenv("EVAL_PROVIDER", "gateway")

    # Ollama settings (no API key needed, it's local)
    OLLAMA_URL: str = os.getenv("OLLAMA_URL", "http://127.0.0.1:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "gemma3:4b")

    # Deepgram key for the live transcript shown while recording
    DEEPGRAM_API_KEY: Optional[str] = os.getenv("DEEPGRAM_API_KEY")

    # Client / server wiring
    PRACTICE_SERVICE_URL: str = os.getenv("PRACTICE_SERVICE_URL", "http://127.0.0.1:8010")
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8010"))

    @classmethod
    def validate(cls) -> List[str]:
        """Validate configuration and return list of missing required settings."""
        missing = []

        if cls.EVAL_PROVIDER.lower() == "gateway" and not cls.GATEWAY_API_KEY:
            missing.append("GATEWAY_API_KEY (required when EVAL_PROVIDER=gateway)")

        # Whisper is optional: typed turns work without it
        if not cls.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY (optional, needed for spoken turns)")

        return missing
