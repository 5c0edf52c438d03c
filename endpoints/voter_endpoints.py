from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from persistence.errors import (
    StoreUnavailableError,
    VoteNotFoundError,
    VoterAlreadyExistsError,
    VoterNotFoundError,
    VoterStoreError,
)
from persistence.repositories import AsyncVoterRepository
from persistence.voters import VoteRecord, Voter

router = APIRouter(tags=["voters"])
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def get_voter_repository(request: Request) -> AsyncVoterRepository:
    return request.app.state.voter_repository


def _http_error(op: str, e: VoterStoreError) -> HTTPException:
    if isinstance(e, (VoterNotFoundError, VoteNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, VoterAlreadyExistsError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, StoreUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    logger.warning("%s failed (%d): %s", op, code, e)
    return HTTPException(status_code=code, detail=str(e))


def _vote_doc(vote: VoteRecord) -> dict[str, Any]:
    return vote.model_dump(mode="json", by_alias=True)


# -------------------------------------------------------------------
# Voters
# -------------------------------------------------------------------
@router.get("/voter")
async def list_all_voters(repo: AsyncVoterRepository = Depends(get_voter_repository)):
    try:
        voters = await repo.list_voters()
    except VoterStoreError as e:
        raise _http_error("list voters", e) from e
    return [v.to_doc() for v in voters]


@router.post("/voter")
async def add_voter(voter: Voter, repo: AsyncVoterRepository = Depends(get_voter_repository)):
    try:
        created = await repo.create_voter(voter)
    except VoterStoreError as e:
        raise _http_error("add voter", e) from e
    return created.to_doc()


@router.delete("/voter")
async def delete_all_voters(repo: AsyncVoterRepository = Depends(get_voter_repository)):
    try:
        deleted = await repo.delete_all_voters()
    except VoterStoreError as e:
        raise _http_error("delete all voters", e) from e
    return {"deleted": deleted}


@router.get("/voter/{voter_id}")
async def get_voter(
    voter_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    try:
        voter = await repo.get_voter(voter_id)
    except VoterStoreError as e:
        raise _http_error("get voter", e) from e
    return voter.to_doc()


@router.put("/voter/{voter_id}")
async def update_voter(
    voter: Voter,
    voter_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    if voter.voter_id != voter_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"body VoterId {voter.voter_id} does not match path id {voter_id}",
        )
    try:
        updated = await repo.update_voter(voter)
    except VoterStoreError as e:
        raise _http_error("update voter", e) from e
    return updated.to_doc()


@router.delete("/voter/{voter_id}")
async def delete_voter(
    voter_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    try:
        await repo.delete_voter(voter_id)
    except VoterStoreError as e:
        raise _http_error("delete voter", e) from e
    return {"deleted": voter_id}


# -------------------------------------------------------------------
# Vote history
# -------------------------------------------------------------------
@router.post("/voter/{voter_id}")
async def add_vote_to_voter(
    vote: VoteRecord,
    voter_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    try:
        voter = await repo.add_vote(voter_id, vote)
    except VoterStoreError as e:
        raise _http_error("add vote", e) from e
    return voter.to_doc()


@router.get("/voter/{voter_id}/polls")
async def get_vote_history(
    voter_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    try:
        history = await repo.get_vote_history(voter_id)
    except VoterStoreError as e:
        raise _http_error("get vote history", e) from e
    return [_vote_doc(v) for v in history]


@router.get("/voter/{voter_id}/polls/{poll_id}")
async def get_single_vote(
    voter_id: int = Path(..., ge=0),
    poll_id: int = Path(..., ge=0),
    repo: AsyncVoterRepository = Depends(get_voter_repository),
):
    try:
        vote = await repo.get_vote(voter_id, poll_id)
    except VoterStoreError as e:
        raise _http_error("get vote", e) from e
    return _vote_doc(vote)


# -------------------------------------------------------------------
# Health
# -------------------------------------------------------------------
@router.get("/health")
async def health_check(request: Request):
    store_ok = await request.app.state.document_store.ping()
    started_at = getattr(request.app.state, "started_at", None)
    uptime = int(time.monotonic() - started_at) if started_at is not None else 0
    return {
        "status": "ok" if store_ok else "degraded",
        "store": "reachable" if store_ok else "unreachable",
        "version": API_VERSION,
        "uptime": uptime,
    }
