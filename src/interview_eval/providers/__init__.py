"""Model provider adapters."""

from typing import List, Optional

from interview_eval.config import Settings, get_settings
from interview_eval.providers.base import ModelProvider, classify_provider_error
from interview_eval.providers.litellm_provider import LiteLLMCompletionProvider
from interview_eval.providers.openai_provider import OpenAIEmbeddingProvider


class CompositeModelProvider:
    """Embeddings from one adapter, completions from another."""

    def __init__(
        self,
        embeddings: OpenAIEmbeddingProvider,
        completions: LiteLLMCompletionProvider,
    ):
        self.embeddings = embeddings
        self.completions = completions

    async def embed(self, text: str) -> List[float]:
        return await self.embeddings.embed(text)

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        return await self.embeddings.embed_batch(texts)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        return await self.completions.complete(prompt, temperature=temperature, max_tokens=max_tokens)


def build_model_provider(settings: Optional[Settings] = None) -> CompositeModelProvider:
    """Build the default provider from settings."""
    settings = settings or get_settings()
    return CompositeModelProvider(
        embeddings=OpenAIEmbeddingProvider(settings.embedding),
        completions=LiteLLMCompletionProvider(settings.llm),
    )


__all__ = [
    "CompositeModelProvider",
    "LiteLLMCompletionProvider",
    "ModelProvider",
    "OpenAIEmbeddingProvider",
    "build_model_provider",
    "classify_provider_error",
]
