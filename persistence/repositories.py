from __future__ import annotations

import logging
from typing import Protocol

from .errors import (
    PartialDeleteError,
    VoteNotFoundError,
    VoterAlreadyExistsError,
    VoterNotFoundError,
)
from .interfaces import DocumentStore
from .keys import VOTER_KEY_PREFIX, voter_key
from .voters import VoteRecord, Voter

logger = logging.getLogger(__name__)


class AsyncVoterRepository(Protocol):
    async def create_voter(self, voter: Voter) -> Voter: ...
    async def get_voter(self, voter_id: int) -> Voter: ...
    async def update_voter(self, voter: Voter) -> Voter: ...
    async def delete_voter(self, voter_id: int) -> None: ...
    async def delete_all_voters(self) -> int: ...
    async def list_voters(self) -> list[Voter]: ...

    async def get_vote_history(self, voter_id: int) -> list[VoteRecord]: ...
    async def get_vote(self, voter_id: int, poll_id: int) -> VoteRecord: ...
    async def add_vote(self, voter_id: int, vote: VoteRecord) -> Voter: ...


class AsyncDocumentVoterRepository(AsyncVoterRepository):
    """
    Voter persistence on top of any DocumentStore.

    One document per voter at voter:<id>. Multi-step operations (exists-then-write
    on create, read-then-write on update/add_vote, enumerate-then-delete on
    delete_all) are not atomic: concurrent writers to the same voter can race,
    and the last write wins. Single get/set calls are atomic in the store.
    """

    def __init__(self, store: DocumentStore, *, trace_calls: bool = False) -> None:
        self._store = store
        self._trace_level = logging.INFO if trace_calls else logging.DEBUG

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def _load(self, voter_id: int) -> Voter:
        key = voter_key(voter_id)
        doc = await self._store.get(key)
        if doc is None:
            raise VoterNotFoundError(voter_id)
        return Voter.from_doc(key, doc)

    async def _save(self, voter: Voter) -> None:
        await self._store.set(voter_key(voter.voter_id), voter.to_doc())

    async def create_voter(self, voter: Voter) -> Voter:
        logger.log(self._trace_level, "create voter %s", voter.voter_id)
        if await self._store.get(voter_key(voter.voter_id)) is not None:
            raise VoterAlreadyExistsError(voter.voter_id)
        await self._save(voter)
        return voter

    async def get_voter(self, voter_id: int) -> Voter:
        logger.log(self._trace_level, "get voter %s", voter_id)
        return await self._load(voter_id)

    async def update_voter(self, voter: Voter) -> Voter:
        logger.log(self._trace_level, "update voter %s", voter.voter_id)
        if await self._store.get(voter_key(voter.voter_id)) is None:
            raise VoterNotFoundError(voter.voter_id)
        await self._save(voter)
        return voter

    async def delete_voter(self, voter_id: int) -> None:
        logger.log(self._trace_level, "delete voter %s", voter_id)
        if await self._store.delete(voter_key(voter_id)) == 0:
            raise VoterNotFoundError(voter_id)

    async def delete_all_voters(self) -> int:
        keys = await self._store.keys(VOTER_KEY_PREFIX)
        logger.log(self._trace_level, "delete all voters (%d keys)", len(keys))
        if not keys:
            return 0
        deleted = await self._store.delete(*keys)
        if deleted != len(keys):
            raise PartialDeleteError(expected=len(keys), deleted=deleted)
        return deleted

    async def list_voters(self) -> list[Voter]:
        keys = await self._store.keys(VOTER_KEY_PREFIX)
        logger.log(self._trace_level, "list voters (%d keys)", len(keys))
        voters: list[Voter] = []
        for key in keys:
            doc = await self._store.get(key)
            if doc is None:
                # Deleted between enumeration and read.
                logger.info("%s vanished while listing; skipping", key)
                continue
            voters.append(Voter.from_doc(key, doc))
        voters.sort(key=lambda v: v.voter_id)
        return voters

    async def get_vote_history(self, voter_id: int) -> list[VoteRecord]:
        voter = await self._load(voter_id)
        return list(voter.vote_history)

    async def get_vote(self, voter_id: int, poll_id: int) -> VoteRecord:
        voter = await self._load(voter_id)
        for vote in voter.vote_history:
            if vote.poll_id == poll_id:
                return vote
        raise VoteNotFoundError(voter_id, poll_id)

    async def add_vote(self, voter_id: int, vote: VoteRecord) -> Voter:
        logger.log(self._trace_level, "add vote poll=%s to voter %s", vote.poll_id, voter_id)
        voter = await self._load(voter_id)
        voter.vote_history.append(vote)
        await self._save(voter)
        return voter
