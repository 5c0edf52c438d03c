from __future__ import annotations

from .errors import (
    DocumentDecodeError,
    PartialDeleteError,
    StoreUnavailableError,
    VoteNotFoundError,
    VoterAlreadyExistsError,
    VoterNotFoundError,
    VoterStoreError,
)
from .interfaces import DocumentStore
from .keys import VOTER_KEY_PREFIX, voter_key
from .memory_store import InMemoryDocumentStore
from .redis_store import RedisJsonDocumentStore
from .repositories import AsyncDocumentVoterRepository, AsyncVoterRepository
from .voters import VoteRecord, Voter

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "RedisJsonDocumentStore",
    "VOTER_KEY_PREFIX",
    "voter_key",
    "VoteRecord",
    "Voter",
    "AsyncVoterRepository",
    "AsyncDocumentVoterRepository",
    "VoterStoreError",
    "VoterAlreadyExistsError",
    "VoterNotFoundError",
    "VoteNotFoundError",
    "PartialDeleteError",
    "StoreUnavailableError",
    "DocumentDecodeError",
]
