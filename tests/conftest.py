from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def memory_store():
    from persistence.memory_store import InMemoryDocumentStore

    return InMemoryDocumentStore()


@pytest.fixture
def voter_repo(memory_store):
    from persistence.repositories import AsyncDocumentVoterRepository

    return AsyncDocumentVoterRepository(memory_store)


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch, memory_store):
    """
    App wired to an in-memory store so tests never need a running redis.
    """
    from fastapi.testclient import TestClient

    monkeypatch.setenv("VOTER_STORE", "memory")
    import app as app_module

    return TestClient(app_module.create_app(store=memory_store))
