"""
Test doubles for the AI gateway and the speech service.
"""
import json
from typing import Dict, List, Optional, Union

from app.core.errors import UpstreamUnavailable
from app.llm.provider import LLMProvider, LLMResponse


def evaluation_json(score: int, feedback: str = "Solid answer with a clear example.") -> str:
    return json.dumps({
        "score": score,
        "feedback": feedback,
        "strengths": ["Clear structure"],
        "improvements": ["Quantify the impact"],
    })


class ScriptedProvider(LLMProvider):
    """
    AI gateway double. Responses are queued per kind of request
    ("question", "evaluation", "closing"); an Exception in a queue is raised
    instead of answered. Empty queues fall back to a default answer, or fail
    when `fail_all` is set.
    """

    DEFAULTS = {
        "question": "What is a project you are proud of?",
        "evaluation": evaluation_json(70),
        "closing": "Strong interview overall. Keep practicing concrete examples.",
    }

    def __init__(self, fail_all: bool = False):
        self.fail_all = fail_all
        self.queues: Dict[str, List[Union[str, Exception]]] = {kind: [] for kind in self.DEFAULTS}
        self.calls: List[Dict[str, str]] = []

    def queue(self, kind: str, *items: Union[str, Exception]) -> None:
        self.queues[kind].extend(items)

    @staticmethod
    def _kind(prompt: str) -> str:
        if "evaluating a candidate's answer" in prompt:
            return "evaluation"
        if "providing final feedback" in prompt:
            return "closing"
        return "question"

    def chat(self, messages, model, temperature=0.7, max_tokens=None, json_mode=False) -> LLMResponse:
        prompt = messages[-1]["content"]
        kind = self._kind(prompt)
        self.calls.append({"kind": kind, "prompt": prompt, "json_mode": json_mode})

        if self.queues[kind]:
            item = self.queues[kind].pop(0)
        elif self.fail_all:
            item = TimeoutError("gateway timed out")
        else:
            item = self.DEFAULTS[kind]

        if isinstance(item, Exception):
            raise item
        return LLMResponse(content=item, model=model)

    def prompts(self, kind: str) -> List[str]:
        return [call["prompt"] for call in self.calls if call["kind"] == kind]


class FakeSpeech:
    """Speech service double returning fake MP3 bytes."""

    available = True

    def __init__(self, transcript: str = "I led the migration of our billing system to PostgreSQL."):
        self.transcript = transcript
        self.fail_synthesis = False
        self.fail_transcription = False
        self.transcribed: List[str] = []
        self.synthesized: List[str] = []

    def transcribe(self, audio: bytes, content_type: str) -> str:
        if self.fail_transcription:
            raise UpstreamUnavailable("Could not transcribe audio")
        self.transcribed.append(content_type)
        return self.transcript

    def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        if self.fail_synthesis:
            raise UpstreamUnavailable("Could not synthesize speech")
        self.synthesized.append(text)
        return b"mp3:" + text.encode("utf-8")

