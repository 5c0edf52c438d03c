from __future__ import annotations

import pytest

from persistence.keys import VOTER_KEY_PREFIX, voter_key


def test_voter_key_is_prefix_plus_decimal_id():
    assert VOTER_KEY_PREFIX == "voter:"
    assert voter_key(0) == "voter:0"
    assert voter_key(42) == "voter:42"


def test_voter_key_is_injective():
    keys = {voter_key(i) for i in range(1000)}
    assert len(keys) == 1000
    assert voter_key(1) != voter_key(10)


def test_voter_key_rejects_bad_ids():
    with pytest.raises(ValueError):
        voter_key(-1)
    with pytest.raises(TypeError):
        voter_key("7")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        voter_key(True)  # type: ignore[arg-type]
