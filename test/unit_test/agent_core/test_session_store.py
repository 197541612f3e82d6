from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from deskmate_ai.agent_core.errors import SessionNotFoundError
from deskmate_ai.agent_core.schemas.domain import DEFAULT_CAPABILITIES
from deskmate_ai.agent_core.session_store import SessionStore


def test_get_or_create_returns_same_session() -> None:
    store = SessionStore()
    a = store.get_or_create("s1", working_directory="/tmp")
    b = store.get_or_create("s1", working_directory="/elsewhere")
    assert a is b
    assert b.current_directory == "/tmp"
    assert len(store) == 1


def test_new_session_defaults() -> None:
    session = SessionStore().get_or_create("fresh")
    snap = session.snapshot()
    assert snap.id == "fresh"
    assert snap.active is True
    assert snap.actions == []
    assert snap.context == {}
    assert snap.current_directory == os.getcwd()
    assert snap.capabilities == DEFAULT_CAPABILITIES


def test_get_unknown_session_raises() -> None:
    store = SessionStore()
    with pytest.raises(SessionNotFoundError) as exc:
        store.get("missing")
    assert exc.value.session_id == "missing"
    assert str(exc.value) == "Session not found: missing"


def test_concurrent_get_or_create_yields_one_session() -> None:
    store = SessionStore()
    with ThreadPoolExecutor(max_workers=8) as pool:
        sessions = list(pool.map(lambda _: store.get_or_create("shared"), range(64)))
    assert all(s is sessions[0] for s in sessions)
    assert store.ids() == ["shared"]
