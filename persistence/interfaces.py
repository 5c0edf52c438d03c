from __future__ import annotations

from typing import Any, Protocol


class DocumentStore(Protocol):
    """
    Minimal DB-friendly interface: JSON-like documents persisted under string keys.

    Implementations must be safe to share between concurrent requests. Each call
    is atomic on its own; nothing here groups calls into a transaction.
    """

    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the document at `key`, or None when the key is absent."""
        ...

    async def set(self, key: str, doc: dict[str, Any]) -> None:
        """Create or replace the whole document at `key`."""
        ...

    async def delete(self, *keys: str) -> int:
        """Delete `keys` and return how many documents were actually removed."""
        ...

    async def keys(self, prefix: str) -> list[str]:
        """Return every key starting with `prefix`, in no particular order."""
        ...

    async def ping(self) -> bool:
        """Advisory connectivity probe. Never raises."""
        ...

    async def close(self) -> None:
        ...
