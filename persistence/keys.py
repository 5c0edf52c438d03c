from __future__ import annotations

VOTER_KEY_PREFIX = "voter:"


def voter_key(voter_id: int) -> str:
    # voter:<decimal id>, no padding, so distinct ids never share a key.
    if isinstance(voter_id, bool) or not isinstance(voter_id, int):
        raise TypeError(f"voter id must be an int, got {type(voter_id).__name__}")
    if voter_id < 0:
        raise ValueError(f"voter id must be non-negative, got {voter_id}")
    return f"{VOTER_KEY_PREFIX}{voter_id}"

