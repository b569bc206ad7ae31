"""OpenAI embeddings adapter."""

from typing import List, Optional

from interview_eval.config import EmbeddingSettings, get_settings
from interview_eval.providers.base import classify_provider_error
from interview_eval.utils.errors import PermanentProviderError
from interview_eval.utils.logging import get_logger

logger = get_logger("openai_provider")


class OpenAIEmbeddingProvider:
    """Generate embeddings through an OpenAI-compatible embeddings endpoint."""

    def __init__(self, embedding_settings: Optional[EmbeddingSettings] = None):
        self.settings = embedding_settings or get_settings().embedding
        self._model_name = self.settings.embedding_model
        self._client = None  # lazy

    @property
    def model_name(self) -> str:
        return self._model_name

    def _get_client(self):
        """Create the AsyncOpenAI client on first use."""
        if self._client is not None:
            return self._client

        from openai import AsyncOpenAI

        if not self.settings.openai_api_key:
            raise PermanentProviderError(
                "OPENAI_API_KEY is required for embeddings",
                details={"provider": "openai", "model": self._model_name},
            )
        self._client = AsyncOpenAI(
            api_key=self.settings.openai_api_key,
            base_url=self.settings.openai_base_url,
            timeout=self.settings.embedding_timeout,
        )
        return self._client

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """Embed texts in a single request, preserving input order."""
        client = self._get_client()
        try:
            resp = await client.embeddings.create(model=self._model_name, input=texts)
        except Exception as e:
            raise classify_provider_error(e, provider="openai") from e

        data = sorted(resp.data, key=lambda d: d.index)
        vectors = [list(d.embedding) for d in data]
        if len(vectors) != len(texts):
            raise PermanentProviderError(
                "Embedding response size mismatch",
                details={"expected": len(texts), "got": len(vectors), "model": self._model_name},
            )
        return vectors

    async def embed(self, text: str) -> List[float]:
        """Embed a single text."""
        vectors = await self.embed_batch([text])
        return vectors[0]
