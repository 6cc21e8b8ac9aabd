"""LLM service: one generative completion per request, parsed into a loose JSON object."""
import json
import logging
import re
from typing import Any, Callable, Dict, Optional

from workout_timer_api.ai import AIClientFactory, AIRequestContext
from workout_timer_api.config import settings
from workout_timer_api.services.prompts.schedule_prompt import build_prompt


logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'^```(?:json)?\s*|\s*```$', re.IGNORECASE)
_OBJECT_RE = re.compile(r'\{[\s\S]*\}')

FEATURE_NAME = "workout_timer_generate"


class ProviderError(RuntimeError):
    """Raised when the generative provider call fails outright."""


class MalformedResponseError(RuntimeError):
    """Raised when the provider's text is not a JSON object."""


class LLMService:
    """Adapter around the generative provider."""

    @staticmethod
    def complete_with_openai(
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> str:
        """
        Run one OpenAI chat completion.

        Args:
            system_prompt: Output contract
            user_prompt: Message embedding the workout text
            model: OpenAI model to use (defaults to OPENAI_MODEL)
            user_id: Optional user ID for tracking

        Returns:
            Raw completion text

        Raises:
            ProviderError: On missing credentials, transport failure or timeout
        """
        model = model or settings.OPENAI_MODEL
        context = AIRequestContext(
            user_id=user_id,
            feature_name=FEATURE_NAME,
            custom_properties={"model": model},
        )

        try:
            client = AIClientFactory.create_openai_client(context=context)
            response = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.1,  # Low temperature for structured output
                response_format={"type": "json_object"},
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            raise ProviderError(f"OpenAI API call failed: {e}") from e

    @staticmethod
    def complete_with_anthropic(
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> str:
        """
        Run one Anthropic messages call.

        Raises:
            ProviderError: On missing credentials, transport failure or timeout
        """
        model = model or settings.ANTHROPIC_MODEL
        context = AIRequestContext(
            user_id=user_id,
            feature_name=FEATURE_NAME,
            custom_properties={"model": model},
        )

        try:
            client = AIClientFactory.create_anthropic_client(context=context)
            message = client.messages.create(
                model=model,
                max_tokens=4096,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=0.1,
            )
            return message.content[0].text or ""
        except Exception as e:
            raise ProviderError(f"Anthropic API call failed: {e}") from e

    @staticmethod
    def complete(
        system_prompt: str,
        user_prompt: str,
        provider: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Run one completion against the configured provider.

        Args:
            system_prompt: Output contract
            user_prompt: Message embedding the workout text
            provider: "openai" or "anthropic" (defaults to LLM_PROVIDER)
            **kwargs: Additional arguments for the provider call

        Returns:
            Raw completion text
        """
        provider = (provider or settings.LLM_PROVIDER).lower()
        if provider == "openai":
            return LLMService.complete_with_openai(system_prompt, user_prompt, **kwargs)
        elif provider == "anthropic":
            return LLMService.complete_with_anthropic(system_prompt, user_prompt, **kwargs)
        else:
            raise ProviderError(f"Unknown LLM provider: {provider}. Use 'openai' or 'anthropic'.")

    @staticmethod
    def parse_loose_object(raw: str) -> Dict[str, Any]:
        """
        Parse provider text into an untyped object tree.

        Raises:
            MalformedResponseError: If no JSON object can be recovered
        """
        text = _FENCE_RE.sub("", (raw or "").strip())
        if not text:
            raise MalformedResponseError("Empty response from provider")

        # The model may wrap the object in prose
        json_match = _OBJECT_RE.search(text)
        candidate = json_match.group(0) if json_match else text
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Provider returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    @classmethod
    def generate_loose_object(
        cls,
        text: str,
        level: Optional[str] = None,
        complete: Optional[Callable[[str, str], str]] = None,
    ) -> Dict[str, Any]:
        """
        Prompt the provider with the workout text and parse its reply.

        Args:
            text: Raw workout text
            level: Optional athlete level for the prompt hint
            complete: Provider function (defaults to LLMService.complete)

        Raises:
            ProviderError: If the provider call fails
            MalformedResponseError: If the reply is not a JSON object
        """
        prompt = build_prompt(text, level)
        complete = complete or cls.complete
        raw = complete(prompt.system, prompt.user)
        logger.info(f"Provider response: {(raw or '')[:100]!r}...")
        return cls.parse_loose_object(raw)
