"""Tests for model provider adapters and error classification."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from interview_eval.config import EmbeddingSettings, LLMSettings
from interview_eval.providers import CompositeModelProvider, ModelProvider, build_model_provider
from interview_eval.providers.base import classify_provider_error
from interview_eval.providers.litellm_provider import LiteLLMCompletionProvider
from interview_eval.providers.openai_provider import OpenAIEmbeddingProvider
from interview_eval.utils.errors import PermanentProviderError, TransientProviderError


class StatusError(Exception):
    """SDK-style exception carrying an HTTP status."""

    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class APIConnectionError(Exception):
    pass


class TestClassifyProviderError:
    """Test transient/permanent classification."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_transient_statuses(self, status):
        assert isinstance(classify_provider_error(StatusError("err", status)), TransientProviderError)

    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    def test_permanent_statuses(self, status):
        error = classify_provider_error(StatusError("err", status))
        assert isinstance(error, PermanentProviderError)
        assert error.provider_status == status

    def test_quota_429_is_permanent(self):
        error = classify_provider_error(StatusError("You exceeded your current quota", 429))
        assert isinstance(error, PermanentProviderError)
        assert error.details["quota_exceeded"] is True

    def test_overloaded_message_is_transient(self):
        error = classify_provider_error(Exception("The model is overloaded. Please try again later."))
        assert isinstance(error, TransientProviderError)

    def test_timeouts_and_connection_errors_are_transient(self):
        assert isinstance(classify_provider_error(asyncio.TimeoutError()), TransientProviderError)
        assert isinstance(classify_provider_error(APIConnectionError("reset")), TransientProviderError)

    def test_unknown_error_is_permanent(self):
        assert isinstance(classify_provider_error(ValueError("bad input")), PermanentProviderError)

    def test_provider_errors_pass_through(self):
        original = TransientProviderError("busy")
        assert classify_provider_error(original) is original


class TestLiteLLMCompletionProvider:
    """Test LiteLLM completion calls."""

    @pytest.mark.asyncio
    async def test_complete_success(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        provider = LiteLLMCompletionProvider(LLMSettings(gemini_api_key="test-key"))
        mock_response = {"choices": [{"message": {"content": "1. What is REST?"}}]}

        with patch(
            "interview_eval.providers.litellm_provider.acompletion",
            new_callable=AsyncMock,
            return_value=mock_response,
        ) as mock_acompletion:
            text = await provider.complete("prompt", temperature=0.8, max_tokens=800)

        assert text == "1. What is REST?"
        kwargs = mock_acompletion.call_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.5-flash"
        assert kwargs["temperature"] == 0.8
        assert kwargs["max_tokens"] == 800
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    @pytest.mark.asyncio
    async def test_complete_object_response(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        provider = LiteLLMCompletionProvider(LLMSettings(gemini_api_key="test-key"))
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="hello"))])

        with patch(
            "interview_eval.providers.litellm_provider.acompletion",
            new_callable=AsyncMock,
            return_value=response,
        ):
            assert await provider.complete("prompt") == "hello"

    @pytest.mark.asyncio
    async def test_missing_api_key_is_permanent(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        provider = LiteLLMCompletionProvider(LLMSettings(gemini_api_key=None))

        with patch(
            "interview_eval.providers.litellm_provider.acompletion", new_callable=AsyncMock
        ) as mock_acompletion:
            with pytest.raises(PermanentProviderError) as exc_info:
                await provider.complete("prompt")

        assert exc_info.value.details["invalid_config"] is True
        mock_acompletion.assert_not_called()

    @pytest.mark.asyncio
    async def test_sdk_errors_are_classified(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        provider = LiteLLMCompletionProvider(LLMSettings(gemini_api_key="test-key"))

        with patch(
            "interview_eval.providers.litellm_provider.acompletion",
            new_callable=AsyncMock,
            side_effect=StatusError("Service Unavailable", 503),
        ):
            with pytest.raises(TransientProviderError):
                await provider.complete("prompt")


class TestOpenAIEmbeddingProvider:
    """Test OpenAI embedding calls."""

    @pytest.mark.asyncio
    async def test_embed_batch_preserves_input_order(self):
        provider = OpenAIEmbeddingProvider(EmbeddingSettings(openai_api_key="sk-test"))
        client = MagicMock()
        client.embeddings.create = AsyncMock(
            return_value=SimpleNamespace(
                data=[
                    SimpleNamespace(index=1, embedding=[0.0, 1.0]),
                    SimpleNamespace(index=0, embedding=[1.0, 0.0]),
                ]
            )
        )
        provider._client = client

        vectors = await provider.embed_batch(["first", "second"])

        assert vectors == [[1.0, 0.0], [0.0, 1.0]]
        client.embeddings.create.assert_awaited_once_with(
            model="text-embedding-3-small", input=["first", "second"]
        )

    @pytest.mark.asyncio
    async def test_size_mismatch_is_permanent(self):
        provider = OpenAIEmbeddingProvider(EmbeddingSettings(openai_api_key="sk-test"))
        client = MagicMock()
        client.embeddings.create = AsyncMock(return_value=SimpleNamespace(data=[]))
        provider._client = client

        with pytest.raises(PermanentProviderError, match="size mismatch"):
            await provider.embed("text")

    @pytest.mark.asyncio
    async def test_rate_limit_is_transient(self):
        provider = OpenAIEmbeddingProvider(EmbeddingSettings(openai_api_key="sk-test"))
        client = MagicMock()
        client.embeddings.create = AsyncMock(side_effect=StatusError("Rate limit reached", 429))
        provider._client = client

        with pytest.raises(TransientProviderError):
            await provider.embed("text")

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = OpenAIEmbeddingProvider(EmbeddingSettings(openai_api_key=None))
        with pytest.raises(PermanentProviderError, match="OPENAI_API_KEY"):
            await provider.embed("text")


def test_build_model_provider(settings):
    provider = build_model_provider(settings)
    assert isinstance(provider, CompositeModelProvider)
    assert isinstance(provider, ModelProvider)
