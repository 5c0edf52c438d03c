from __future__ import annotations


class VoterStoreError(Exception):
    """Base class for every failure raised by the voter persistence layer."""


class VoterAlreadyExistsError(VoterStoreError):
    def __init__(self, voter_id: int):
        super().__init__(f"voter {voter_id} already exists")
        self.voter_id = voter_id


class VoterNotFoundError(VoterStoreError):
    def __init__(self, voter_id: int):
        super().__init__(f"voter {voter_id} does not exist")
        self.voter_id = voter_id


class VoteNotFoundError(VoterStoreError):
    def __init__(self, voter_id: int, poll_id: int):
        super().__init__(f"poll {poll_id} does not exist for voter {voter_id}")
        self.voter_id = voter_id
        self.poll_id = poll_id


class PartialDeleteError(VoterStoreError):
    """Raised when delete-all removed fewer documents than it enumerated."""

    def __init__(self, expected: int, deleted: int):
        super().__init__(f"expected to delete {expected} voters, deleted {deleted}")
        self.expected = expected
        self.deleted = deleted


class StoreUnavailableError(VoterStoreError):
    """The document store could not be reached or rejected the command."""


class DocumentDecodeError(VoterStoreError):
    """A stored document exists but is not a valid voter document."""

    def __init__(self, key: str, reason: str = ""):
        message = f"document at {key!r} could not be decoded"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.key = key
