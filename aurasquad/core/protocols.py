"""
Module-boundary Protocol definitions for the external collaborators.

These Protocols define WHAT each collaborator must do, not HOW. Services
receive implementations through their constructors, so tests can pass
fakes and the scoring engine never touches I/O.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class TextLLMClient(Protocol):
    """
    Language-model collaborator: prompt in, text out.

    Implementations raise RateLimitedError on HTTP 429 and LLMError on any
    other API failure.
    """

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        ...


@runtime_checkable
class JSONStore(Protocol):
    """Minimal key-value surface the services depend on."""

    async def get_json(self, key: str) -> Any:
        """Return the decoded JSON value, or None if the key is absent."""
        ...

    async def put_json(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        ...

    async def delete(self, key: str) -> bool:
        ...
