"""
Speech-to-text and text-to-speech through the OpenAI audio endpoints.

Unlike question generation there is no fallback content for audio, so every
failure is raised as UpstreamUnavailable.
"""
import logging
from typing import Optional
from openai import OpenAI

from app.core.config import (
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    SPEECH_TIMEOUT_SECONDS,
    TRANSCRIBE_MODEL,
    TTS_MODEL,
    TTS_VOICE,
)
from app.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

SPEECH_MIME = "audio/mpeg"

# audio/* subtype -> filename extension the transcription endpoint recognises
AUDIO_EXTENSIONS = {
    "webm": "webm",
    "wav": "wav",
    "x-wav": "wav",
    "wave": "wav",
    "mpeg": "mp3",
    "mp3": "mp3",
    "mp4": "mp4",
    "m4a": "m4a",
    "x-m4a": "m4a",
    "ogg": "ogg",
    "flac": "flac",
}


def audio_filename(content_type: str) -> str:
    """Pick an upload filename whose extension matches the audio content type."""
    subtype = content_type.split(";")[0].strip().lower().partition("/")[2]
    return f"answer.{AUDIO_EXTENSIONS.get(subtype, 'webm')}"


class SpeechEngine:
    """OpenAI-backed transcription and speech synthesis."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = SPEECH_TIMEOUT_SECONDS,
        voice: str = TTS_VOICE,
    ):
        self.voice = voice
        key = api_key or OPENAI_API_KEY
        self.client = None
        if key:
            self.client = OpenAI(api_key=key, base_url=base_url or OPENAI_BASE_URL, timeout=timeout, max_retries=0)
        else:
            logger.warning("OPENAI_API_KEY not configured - speech features disabled")

    @property
    def available(self) -> bool:
        return self.client is not None

    def _require_client(self) -> OpenAI:
        if self.client is None:
            raise UpstreamUnavailable("Speech service is not configured")
        return self.client

    def transcribe(self, audio: bytes, content_type: str) -> str:
        """
        Transcribe a recorded answer.

        Returns:
            The transcript, stripped (may be empty if nothing was said)
        """
        client = self._require_client()
        try:
            transcript = client.audio.transcriptions.create(
                file=(audio_filename(content_type), audio, content_type),
                model=TRANSCRIBE_MODEL,
            )
        except Exception as e:
            logger.error(f"Transcription failed: {type(e).__name__}: {e}")
            raise UpstreamUnavailable("Could not transcribe audio") from e
        return (transcript.text or "").strip()

    def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        """Synthesize speech for text and return MP3 bytes."""
        client = self._require_client()
        try:
            response = client.audio.speech.create(
                model=TTS_MODEL,
                voice=voice or self.voice,
                input=text,
                response_format="mp3",
            )
            return response.content
        except Exception as e:
            logger.error(f"Speech synthesis failed: {type(e).__name__}: {e}")
            raise UpstreamUnavailable("Could not synthesize speech") from e
