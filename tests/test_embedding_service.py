"""Tests for the embedding service."""

import pytest

from conftest import AlwaysFailingProvider, FakeProvider
from interview_eval.services.embedding_service import EmbeddingService
from interview_eval.utils.errors import (
    EmbeddingError,
    EmptyInputError,
    PermanentProviderError,
    TransientProviderError,
    ValidationError,
)


@pytest.mark.asyncio
async def test_embed_returns_floats(retry_settings, fake_sleep):
    provider = FakeProvider(embed_fn=lambda text: [1, 2, 3])
    svc = EmbeddingService(provider, retry_settings=retry_settings, sleep=fake_sleep)
    assert await svc.embed("hello") == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_embed_retries_transient_failures(retry_settings, fake_sleep):
    provider = FakeProvider(embed_errors=[TransientProviderError("rate limited", provider_status=429)])
    svc = EmbeddingService(provider, retry_settings=retry_settings, sleep=fake_sleep)

    vector = await svc.embed("hello")

    assert len(vector) == 3
    assert len(provider.embed_calls) == 2
    assert fake_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_embed_gives_up_after_retry_budget(retry_settings, fake_sleep):
    provider = AlwaysFailingProvider(TransientProviderError("overloaded", provider_status=503))
    svc = EmbeddingService(provider, retry_settings=retry_settings, sleep=fake_sleep)

    with pytest.raises(EmbeddingError) as exc_info:
        await svc.embed("hello")

    assert len(provider.embed_calls) == 3
    assert isinstance(exc_info.value.__cause__, TransientProviderError)


@pytest.mark.asyncio
async def test_permanent_failure_is_not_retried(retry_settings, fake_sleep):
    provider = AlwaysFailingProvider(PermanentProviderError("invalid input", provider_status=400))
    svc = EmbeddingService(provider, retry_settings=retry_settings, sleep=fake_sleep)

    with pytest.raises(EmbeddingError):
        await svc.embed("hello")

    assert len(provider.embed_calls) == 1
    assert fake_sleep.delays == []


@pytest.mark.asyncio
async def test_blank_text_is_rejected_without_a_call():
    provider = FakeProvider()
    with pytest.raises(EmptyInputError):
        await EmbeddingService(provider).embed("   ")
    assert provider.embed_calls == []


@pytest.mark.asyncio
async def test_malformed_vector_is_rejected():
    provider = FakeProvider(embed_fn=lambda text: [])
    with pytest.raises(EmbeddingError, match="Invalid embedding response"):
        await EmbeddingService(provider).embed("hello")


@pytest.mark.asyncio
async def test_expected_dimension_is_enforced():
    provider = FakeProvider(embed_fn=lambda text: [0.1, 0.2])
    with pytest.raises(EmbeddingError, match="dimension mismatch"):
        await EmbeddingService(provider, expected_dimension=3).embed("hello")


@pytest.mark.asyncio
async def test_embed_batch_preserves_order():
    provider = FakeProvider(embed_fn=lambda text: [float(len(text)), 0.0])
    vectors = await EmbeddingService(provider).embed_batch(["a", "bbb", "cc"])
    assert vectors == [[1.0, 0.0], [3.0, 0.0], [2.0, 0.0]]
    assert provider.embed_calls == ["a", "bbb", "cc"]


@pytest.mark.asyncio
async def test_embed_batch_rejects_empty_list():
    with pytest.raises(ValidationError):
        await EmbeddingService(FakeProvider()).embed_batch([])


@pytest.mark.asyncio
async def test_embed_batch_rejects_blank_item():
    with pytest.raises(EmptyInputError) as exc_info:
        await EmbeddingService(FakeProvider()).embed_batch(["ok", " "])
    assert exc_info.value.details["index"] == 1


@pytest.mark.asyncio
async def test_embed_batch_rejects_mixed_dimensions():
    provider = FakeProvider(embed_fn=lambda text: [0.0] * len(text))
    with pytest.raises(EmbeddingError, match="within batch"):
        await EmbeddingService(provider).embed_batch(["ab", "abc"])


@pytest.mark.asyncio
@pytest.mark.parametrize("vector", [[None, 1.0, 2.0], ["a", "b", "c"]])
async def test_non_numeric_vector_is_an_embedding_error(vector, retry_settings, fake_sleep):
    provider = FakeProvider(embed_fn=lambda text: vector)
    svc = EmbeddingService(provider, retry_settings=retry_settings, sleep=fake_sleep)

    with pytest.raises(EmbeddingError, match="Invalid embedding response"):
        await svc.embed("hello")

    assert len(provider.embed_calls) == 1
