from __future__ import annotations

import json
import threading
from typing import Any

from .errors import DocumentDecodeError
from .interfaces import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local DocumentStore.

    Documents are held as serialized JSON text, so reads hand back fresh
    objects and a malformed entry fails the same way a bad remote document would.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._docs: dict[str, str] = {}

    async def get(self, key: str) -> dict[str, Any] | None:
        with self._guard:
            raw = self._docs.get(key)
        if raw is None:
            return None
        try:
            doc = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentDecodeError(key, str(e)) from e
        if not isinstance(doc, dict):
            raise DocumentDecodeError(key, f"expected a JSON object, got {type(doc).__name__}")
        return doc

    async def set(self, key: str, doc: dict[str, Any]) -> None:
        raw = json.dumps(doc)
        with self._guard:
            self._docs[key] = raw

    async def delete(self, *keys: str) -> int:
        removed = 0
        with self._guard:
            for key in keys:
                if self._docs.pop(key, None) is not None:
                    removed += 1
        return removed

    async def keys(self, prefix: str) -> list[str]:
        with self._guard:
            return [k for k in self._docs if k.startswith(prefix)]

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None

    def put_raw(self, key: str, raw: str) -> None:
        """Store `raw` verbatim, bypassing serialization (used to seed bad documents)."""
        with self._guard:
            self._docs[key] = raw
