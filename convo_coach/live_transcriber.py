"""Best-effort live transcription shown while the user is recording.

The live text is for display only; it never reaches the evaluation service.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import queue
import threading


class LiveTranscriber(ABC):
    """Abstract interface for streaming transcription providers."""

    @abstractmethod
    def start(self, on_transcript: Callable[[str, bool], None]):
        """Start streaming transcription.

        Args:
            on_transcript: Callback(text: str, is_final: bool) -> None
        """
        pass

    @abstractmethod
    def send_audio(self, audio_data: bytes):
        """Send PCM16 audio to the transcriber."""
        pass

    @abstractmethod
    def shutdown(self):
        """Stop streaming and release the connection."""
        pass


class DeepgramLiveTranscriber(LiveTranscriber):
    """Deepgram streaming transcription of the microphone stream."""

    def __init__(self, api_key: Optional[str] = None, sample_rate: int = 16000):
        if api_key is None:
            from convo_coach.config import Config
            api_key = Config.DEEPGRAM_API_KEY
        self.api_key = api_key
        self.sample_rate = sample_rate
        self.connection = None
        self.active = False
        self.audio_queue: "queue.Queue[bytes]" = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def start(self, on_transcript: Callable[[str, bool], None]):
        """Open a Deepgram live connection and start the sender thread."""
        from deepgram import DeepgramClient, LiveOptions, LiveTranscriptionEvents

        # Drop PCM left over from a previous recording
        self._drain_queue()

        client = DeepgramClient(self.api_key)
        connection = client.listen.websocket.v("1")

        def on_message(*args, **kwargs):
            result = kwargs.get("result")
            if result and result.channel and result.channel.alternatives:
                sentence = result.channel.alternatives[0].transcript
                if sentence and self.active:
                    on_transcript(sentence, bool(result.is_final))

        def on_error(*args, **kwargs):
            print(f"[RECORDER] Deepgram error: {kwargs.get('error')}")

        connection.on(LiveTranscriptionEvents.Transcript, on_message)
        connection.on(LiveTranscriptionEvents.Error, on_error)

        options = LiveOptions(
            model="nova-2",
            language="en-US",
            smart_format=True,
            encoding="linear16",
            sample_rate=self.sample_rate,
            channels=1,
            interim_results=True
        )
        if connection.start(options) is False:
            print("[RECORDER] Failed to start Deepgram connection")
            return

        with self._lock:
            self.connection = connection
            self.active = True

        self._worker = threading.Thread(target=self._send_audio_worker, daemon=True)
        self._worker.start()

    def _send_audio_worker(self):
        while self.active:
            try:
                audio_data = self.audio_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self.connection.send(audio_data)
            except Exception as e:
                # Live text is cosmetic; give up on the stream rather than retry
                print(f"[RECORDER] Error sending audio to Deepgram: {e}")
                self.active = False

    def _drain_queue(self):
        while True:
            try:
                self.audio_queue.get_nowait()
            except queue.Empty:
                return

    def send_audio(self, audio_data: bytes):
        if self.active:
            self.audio_queue.put_nowait(audio_data)

    def shutdown(self):
        with self._lock:
            self.active = False
            connection, self.connection = self.connection, None
        if self._worker is not None:
            self._worker.join(timeout=1.0)
            self._worker = None
        self._drain_queue()
        if connection is not None:
            try:
                connection.finish()
            except Exception as e:
                print(f"[RECORDER] Error closing Deepgram connection: {e}")
