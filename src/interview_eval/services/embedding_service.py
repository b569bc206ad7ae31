"""Embedding generation service with transient-failure retry."""

from typing import List, Optional

from interview_eval.config import RetrySettings, get_settings
from interview_eval.providers.base import ModelProvider
from interview_eval.utils.errors import EmbeddingError, EmptyInputError, ProviderError, ValidationError
from interview_eval.utils.logging import get_logger
from interview_eval.utils.retry import retry_transient

logger = get_logger("embedding_service")


class EmbeddingService:
    """
    Turn text into embedding vectors through an injected model provider.

    Rate-limit and overload failures are retried with exponential backoff;
    anything else fails on the first attempt. Batches are embedded one text
    at a time to stay under provider rate limits.
    """

    def __init__(
        self,
        provider: ModelProvider,
        retry_settings: Optional[RetrySettings] = None,
        expected_dimension: Optional[int] = None,
        sleep=None,
    ):
        settings = get_settings()
        self.provider = provider
        self.retry_settings = retry_settings or settings.retry
        self.expected_dimension = (
            expected_dimension
            if expected_dimension is not None
            else settings.embedding.embedding_dimension
        )
        self._sleep = sleep

    async def _embed_one(self, text: str) -> List[float]:
        try:
            vector = await retry_transient(
                lambda: self.provider.embed(text),
                retry_settings=self.retry_settings,
                sleep=self._sleep,
            )
        except ProviderError as e:
            raise EmbeddingError(f"Failed to generate embedding: {e.message}", details=e.details) from e

        if not isinstance(vector, list) or not vector:
            raise EmbeddingError(
                "Invalid embedding response",
                details={"response_type": type(vector).__name__},
            )
        if self.expected_dimension is not None and len(vector) != self.expected_dimension:
            raise EmbeddingError(
                "Embedding dimension mismatch",
                details={"expected_dimension": self.expected_dimension, "actual_dimension": len(vector)},
            )
        try:
            return [float(v) for v in vector]
        except (TypeError, ValueError) as e:
            raise EmbeddingError(
                "Invalid embedding response",
                details={"error": str(e), "dimension": len(vector)},
            ) from e

    async def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Raises:
            EmptyInputError: If the text is empty
            EmbeddingError: If the provider fails or returns a malformed vector
        """
        if text is None or not text.strip():
            raise EmptyInputError("Text for embedding cannot be empty")
        return await self._embed_one(text)

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Embed texts sequentially, one vector per input in input order.

        Raises:
            ValidationError: If no texts are given or one of them is empty
            EmbeddingError: If any embedding fails or dimensions disagree
        """
        if not texts:
            raise ValidationError("No texts provided for embeddings")

        logger.info(f"Generating embeddings: count={len(texts)}")

        vectors: List[List[float]] = []
        for idx, text in enumerate(texts):
            if text is None or not text.strip():
                raise EmptyInputError("Text for embedding cannot be empty", details={"index": idx})
            vector = await self._embed_one(text)
            if vectors and len(vector) != len(vectors[0]):
                raise EmbeddingError(
                    "Embedding dimension mismatch within batch",
                    details={"index": idx, "expected_dimension": len(vectors[0]), "actual_dimension": len(vector)},
                )
            vectors.append(vector)

        logger.info(f"Embeddings generated successfully: count={len(vectors)}, dimension={len(vectors[0])}")
        return vectors
