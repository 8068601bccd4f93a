"""
LLM Runner: builds messages, makes one bounded call, and returns text or parsed JSON.

Every failure (timeout, transport error, non-2xx, empty or malformed output) is
raised as UpstreamUnavailable so callers can switch to fallback content.
"""
import json
import logging
import re
from typing import Optional, Dict, Any, List

from app.core.errors import UpstreamUnavailable
from app.llm.provider import LLMProvider, LLMResponse
from app.llm.router import get_route_for_feature

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant for job seekers preparing for interviews."

_CODE_BLOCK = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_BARE_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of model output.

    Accepts a bare object, an object inside a markdown code block, or an object
    surrounded by prose.

    Raises:
        ValueError: if no JSON object can be parsed
    """
    candidates = [text.strip()]
    block = _CODE_BLOCK.search(text)
    if block:
        candidates.insert(0, block.group(1))
    bare = _BARE_OBJECT.search(text)
    if bare:
        candidates.append(bare.group())

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ValueError(f"No JSON object in model output: {text[:100]!r}")


class LLMRunner:
    """Single-attempt LLM calls for one feature at a time."""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    @property
    def available(self) -> bool:
        return self.provider.available

    def _build_messages(self, prompt: str, system_prompt: Optional[str]) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def _call(self, feature: str, prompt: str, system_prompt: Optional[str], json_mode: bool) -> LLMResponse:
        route = get_route_for_feature(feature)
        try:
            response = self.provider.chat(
                messages=self._build_messages(prompt, system_prompt),
                model=route["model"],
                temperature=route["temperature"],
                max_tokens=route["max_tokens"],
                json_mode=json_mode,
            )
        except Exception as e:
            raise UpstreamUnavailable(f"{feature} generation failed: {type(e).__name__}: {e}") from e

        logger.debug(
            f"LLM call completed: feature={feature}, model={response.model}, "
            f"tokens={response.tokens_in + response.tokens_out}"
        )
        return response

    def generate_text(self, feature: str, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Return non-empty, stripped text for the prompt."""
        response = self._call(feature, prompt, system_prompt, json_mode=False)
        text = (response.content or "").strip()
        if not text:
            raise UpstreamUnavailable(f"{feature} generation returned empty text")
        return text

    def generate_json(self, feature: str, prompt: str, system_prompt: Optional[str] = None) -> Dict[str, Any]:
        """Return the JSON object the model produced for the prompt."""
        response = self._call(feature, prompt, system_prompt, json_mode=True)
        try:
            return parse_json_object(response.content or "")
        except ValueError as e:
            raise UpstreamUnavailable(f"{feature} returned malformed JSON") from e
