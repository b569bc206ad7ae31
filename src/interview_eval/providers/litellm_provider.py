"""Text completion adapter using LiteLLM model routing."""

import os
from typing import Any, Dict, List, Optional

from litellm import acompletion

from interview_eval.config import LLMSettings, get_settings
from interview_eval.providers.base import classify_provider_error
from interview_eval.utils.errors import PermanentProviderError
from interview_eval.utils.logging import get_logger

logger = get_logger("litellm_provider")


class LiteLLMCompletionProvider:
    """
    Free-form text completion through LiteLLM.

    The model is named in LiteLLM format (``gemini/...``, ``openai/...``,
    ``anthropic/...``). API keys are exported to the environment variables
    LiteLLM reads.
    """

    def __init__(self, llm_settings: Optional[LLMSettings] = None):
        self.settings = llm_settings or get_settings().llm
        self.model = self.settings.default_model_name
        self._configure_litellm_environment()

    def _configure_litellm_environment(self) -> None:
        """Export configured API keys for LiteLLM."""
        if self.settings.gemini_api_key:
            os.environ["GEMINI_API_KEY"] = self.settings.gemini_api_key
        if self.settings.openai_api_key:
            os.environ["OPENAI_API_KEY"] = self.settings.openai_api_key
        if self.settings.anthropic_api_key:
            os.environ["ANTHROPIC_API_KEY"] = self.settings.anthropic_api_key
        logger.debug("LiteLLM environment variables configured")

    def _validate_model_configuration(self, model: str) -> None:
        """Fail fast when the selected model has no API key."""
        required = None
        if model.startswith("gemini/") and not self.settings.has_gemini:
            required = "GEMINI_API_KEY"
        elif model.startswith("openai/") and not self.settings.has_openai:
            required = "OPENAI_API_KEY"
        elif model.startswith("anthropic/") and not self.settings.has_anthropic:
            required = "ANTHROPIC_API_KEY"
        if required:
            raise PermanentProviderError(
                message=f"API key not configured for model {model}",
                details={"model": model, "required": [required], "invalid_config": True},
            )

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Pull the message content out of a LiteLLM response."""
        if isinstance(response, dict):
            choices = response.get("choices") or []
            if not choices:
                return ""
            message = choices[0].get("message") or {}
            return message.get("content") or ""
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return getattr(choices[0].message, "content", None) or ""

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate a completion for a single user prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            The completion text (may be empty; callers decide what blank means)

        Raises:
            TransientProviderError: Rate limit, overload or timeout
            PermanentProviderError: Any other provider failure
        """
        self._validate_model_configuration(self.model)

        messages: List[Dict[str, str]] = [{"role": "user", "content": prompt}]
        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "timeout": self.settings.llm_timeout,
        }
        if max_tokens:
            params["max_tokens"] = max_tokens

        try:
            logger.debug(f"Calling LLM model: {self.model}, temperature={temperature}")
            response = await acompletion(**params)
        except Exception as e:
            logger.error(
                f"LLM call failed for model {self.model}: {e}",
                extra={"model": self.model, "error_type": type(e).__name__},
            )
            raise classify_provider_error(e, provider="litellm") from e

        return self._extract_text(response)
