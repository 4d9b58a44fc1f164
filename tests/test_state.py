"""Tests for state module."""

from __future__ import annotations

from webmcp.state import TabState, TabStateStore


class TestTabState:
    def test_defaults(self):
        s = TabState()
        assert s.last_url is None
        assert s.seq == 0
        assert s.registered_domain is None


class TestTabStateStore:
    def test_get_creates(self):
        store = TabStateStore()
        assert store.peek(1) is None
        state = store.get(1)
        assert store.get(1) is state
        assert 1 in store
        assert len(store) == 1

    def test_next_seq_increments(self):
        store = TabStateStore()
        assert store.next_seq(1) == 1
        assert store.next_seq(1) == 2
        assert store.next_seq(2) == 1

    def test_is_current(self):
        store = TabStateStore()
        seq = store.next_seq(1)
        assert store.is_current(1, seq)
        store.next_seq(1)
        assert not store.is_current(1, seq)

    def test_is_current_after_remove(self):
        store = TabStateStore()
        seq = store.next_seq(1)
        store.remove(1)
        assert not store.is_current(1, seq)
        assert 1 not in store

    def test_reset_navigation_keeps_seq(self):
        store = TabStateStore()
        state = store.get(1)
        state.last_url = "example.com/"
        state.registered_domain = "example.com"
        store.next_seq(1)
        store.reset_navigation(1)
        assert state.last_url is None
        assert state.registered_domain is None
        assert state.seq == 1

    def test_remove_unknown(self):
        store = TabStateStore()
        store.remove(99)
        assert len(store) == 0
