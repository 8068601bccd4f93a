"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, APIError, APITimeoutError

from app.core.config import OPENAI_API_KEY, OPENAI_BASE_URL, AI_TIMEOUT_SECONDS
from app.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = AI_TIMEOUT_SECONDS,
    ):
        """Initialize OpenAI client with a bounded timeout and no SDK retries."""
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.client = OpenAI(
            api_key=self.api_key,
            base_url=base_url or OPENAI_BASE_URL,
            timeout=timeout,
            max_retries=0,
        )
        logger.info("OpenAI provider initialized")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a chat completion."""
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 1024,
                **kwargs
            )
        except APITimeoutError:
            logger.warning(f"OpenAI request timed out: model={model}")
            raise
        except APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            model=model,
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )


class UnconfiguredProvider(LLMProvider):
    """Stand-in used when no API key is set; every call fails so fallbacks apply."""

    def chat(self, messages, model, temperature=0.7, max_tokens=None, json_mode=False) -> LLMResponse:
        raise RuntimeError("AI gateway is not configured")

    @property
    def available(self) -> bool:
        return False


def build_provider() -> LLMProvider:
    """Return the OpenAI provider, or an unconfigured stand-in without an API key."""
    try:
        return OpenAIProvider()
    except ValueError:
        logger.warning("OPENAI_API_KEY not configured - interview engine will use fallback content")
        return UnconfiguredProvider()
