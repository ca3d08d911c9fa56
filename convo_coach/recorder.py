"""Microphone recording for spoken turns."""

from __future__ import annotations

import base64
import io
import threading
import wave
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

import numpy as np

from convo_coach.errors import MicrophoneError
from convo_coach.live_transcriber import LiveTranscriber

StreamFactory = Callable[..., Any]


def to_mono_int16(indata: np.ndarray) -> bytes:
    """
    Convert a sounddevice callback block into mono PCM16 little-endian bytes.
    Uses the first channel only.
    """
    x = np.asarray(indata)

    if x.ndim == 2 and x.shape[1] >= 1:
        mono = x[:, 0]
    else:
        mono = x.reshape(-1)

    if mono.dtype == np.int16:
        f = mono.astype(np.float32) / 32768.0
    else:
        f = mono.astype(np.float32)

    f = np.clip(f, -1.0, 1.0)
    pcm16 = (f * 32767.0).astype(np.int16).tobytes(order="C")
    return pcm16


def encode_wav(pcm16: bytes, sample_rate: int) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm16)
    return buf.getvalue()


def to_data_url(audio: bytes, mime_type: str = "audio/wav") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"


def _sounddevice_stream(**kwargs):
    import sounddevice as sd
    return sd.InputStream(**kwargs)


class MicrophoneRecorder:
    """Records the microphone until stopped and returns one WAV data URL.

    An optional live transcriber receives the same PCM while recording; its
    text is exposed through ``live_text`` for display and cleared on stop.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        blocksize: int = 1600,
        live_transcriber: Optional[LiveTranscriber] = None,
        on_live_text: Optional[Callable[[str], None]] = None,
        stream_factory: Optional[StreamFactory] = None,
    ):
        self.sample_rate = sample_rate
        self.blocksize = blocksize
        self.live_transcriber = live_transcriber
        self.on_live_text = on_live_text
        self._stream_factory = stream_factory or _sounddevice_stream
        self._stream = None
        self._chunks: List[bytes] = []
        self._lock = threading.Lock()
        self.live_text = ""

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def start(self):
        """Open the microphone and begin capturing.

        Raises:
            MicrophoneError: If the input stream cannot be opened
        """
        if self._stream is not None:
            return

        with self._lock:
            self._chunks = []
        self.live_text = ""

        try:
            stream = self._stream_factory(
                samplerate=self.sample_rate,
                channels=1,
                dtype="int16",
                blocksize=self.blocksize,
                callback=self._callback,
            )
            stream.start()
        except Exception as e:
            print(f"[RECORDER] Could not open microphone: {e}")
            raise MicrophoneError() from e

        self._stream = stream
        print(f"[RECORDER] Recording at {self.sample_rate} Hz")

        if self.live_transcriber is not None:
            try:
                self.live_transcriber.start(self._on_live_transcript)
            except Exception as e:
                # Live text is optional; the recording carries on without it
                print(f"[RECORDER] Live transcription unavailable: {e}")
                self.live_transcriber = None

    def _callback(self, indata, frames, time_info, status):
        if status:
            print(f"[RECORDER] {status}")
        pcm = to_mono_int16(indata)
        with self._lock:
            self._chunks.append(pcm)
        if self.live_transcriber is not None:
            self.live_transcriber.send_audio(pcm)

    def _on_live_transcript(self, text: str, is_final: bool):
        self.live_text = text
        if self.on_live_text is not None:
            self.on_live_text(text)

    def _teardown(self):
        stream, self._stream = self._stream, None
        try:
            if stream is not None:
                try:
                    stream.stop()
                finally:
                    stream.close()
        finally:
            if self.live_transcriber is not None:
                self.live_transcriber.shutdown()
            self.live_text = ""

    def stop(self) -> str:
        """Stop recording and return the captured audio as a WAV data URL.

        Returns an empty string when nothing was captured.
        """
        self._teardown()
        with self._lock:
            pcm = b"".join(self._chunks)
            self._chunks = []
        print(f"[RECORDER] Stopped, captured {len(pcm)} bytes")
        if not pcm:
            return ""
        return to_data_url(encode_wav(pcm, self.sample_rate))

    @contextmanager
    def recording(self) -> Iterator["MicrophoneRecorder"]:
        """Record inside a with-block; the microphone is released on exit."""
        self.start()
        try:
            yield self
        finally:
            if self.is_recording:
                self._teardown()
