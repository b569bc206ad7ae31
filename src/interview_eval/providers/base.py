"""Model provider capability interface and error classification."""

import asyncio
from typing import List, Optional, Protocol, runtime_checkable

from interview_eval.utils.errors import (
    PermanentProviderError,
    ProviderError,
    TransientProviderError,
)

# Statuses that signal overload or throttling rather than a bad request
TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}


@runtime_checkable
class ModelProvider(Protocol):
    """
    Narrow interface to the external embedding and completion models.

    Implementations raise ``TransientProviderError`` for rate-limit/overload
    signals and ``PermanentProviderError`` for everything that will not
    succeed on retry. Retrying is left to the caller.
    """

    async def embed(self, text: str) -> List[float]:
        ...

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        ...

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        ...


def _status_of(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def classify_provider_error(error: BaseException, provider: str = "provider") -> ProviderError:
    """
    Map an SDK exception onto the transient/permanent provider taxonomy.

    Throttling, overload, 5xx, timeouts and dropped connections are transient.
    A 429 that reports exhausted quota is permanent, as are all other
    client errors (bad request, auth, unknown model).
    """
    if isinstance(error, ProviderError):
        return error

    status = _status_of(error)
    text = str(error)
    lowered = text.lower()
    details = {"provider": provider, "error_type": type(error).__name__}
    name = type(error).__name__.lower()

    if "quota" in lowered:
        return PermanentProviderError(
            message=f"Quota exceeded: {text}",
            provider_status=status,
            details={**details, "quota_exceeded": True},
        )

    transient = (
        status in TRANSIENT_STATUS_CODES
        or "overloaded" in lowered
        or "timeout" in name
        or "connection" in name
        or isinstance(error, (asyncio.TimeoutError, ConnectionError))
    )
    if transient:
        return TransientProviderError(message=text or "Provider unavailable", provider_status=status, details=details)

    return PermanentProviderError(message=text or "Provider rejected the request", provider_status=status, details=details)
