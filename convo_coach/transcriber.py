"""Transcriber abstraction for audio-to-text conversion."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple
import base64
import binascii

import httpx

from convo_coach.errors import ConfigurationError, TranscriptionError

DEFAULT_MIME_TYPE = "audio/webm"

# MIME type -> upload filename extension
_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
}


def decode_audio_payload(payload: str) -> Tuple[bytes, str]:
    """Decode a base64 audio payload, with or without a data-URL prefix.

    Args:
        payload: ``data:audio/wav;base64,AAAA...`` or bare base64 text

    Returns:
        (audio bytes, MIME type)

    Raises:
        TranscriptionError: If the payload is not valid base64 audio
    """
    mime_type = DEFAULT_MIME_TYPE
    data = payload or ""
    if "," in data:
        header, data = data.split(",", 1)
        if header.startswith("data:"):
            mime_type = header[5:].split(";", 1)[0] or DEFAULT_MIME_TYPE

    try:
        audio = base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        print(f"[TRANSCRIBE] payload is not valid base64: {e}")
        raise TranscriptionError()

    if not audio:
        raise TranscriptionError()
    return audio, mime_type


class Transcriber(ABC):
    """Abstract interface for batch transcription providers."""

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
        """Transcribe one complete recording.

        Args:
            audio: Encoded audio bytes
            mime_type: MIME type of the encoding

        Returns:
            Recognized text
        """
        pass


class WhisperTranscriber(Transcriber):
    """OpenAI Whisper transcription over the REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        from convo_coach.config import Config

        self.api_key = api_key or Config.OPENAI_API_KEY
        self.url = url or Config.TRANSCRIPTION_URL
        self.model = model or Config.TRANSCRIPTION_MODEL
        self.transport = transport

        if not self.api_key:
            raise ConfigurationError("Audio transcription is not configured")

    async def transcribe(self, audio: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
        """Send the recording to Whisper and return the recognized text."""
        ext = _EXTENSIONS.get(mime_type, "webm")
        files = {"file": (f"audio.{ext}", audio, mime_type)}
        data = {"model": self.model}
        headers = {"Authorization": f"Bearer {self.api_key}"}

        print(f"[TRANSCRIBE] Sending {len(audio)} bytes ({mime_type}) to {self.model}...")
        async with httpx.AsyncClient(timeout=90, transport=self.transport) as client:
            r = await client.post(self.url, data=data, files=files, headers=headers)

        if r.status_code >= 400:
            print(f"[TRANSCRIBE] Whisper API error: {r.status_code} {r.text[:200]}")
            raise TranscriptionError()

        text = (r.json().get("text") or "").strip()
        print(f"[TRANSCRIBE] Transcription: {text[:80]}{'...' if len(text) > 80 else ''}")
        return text
