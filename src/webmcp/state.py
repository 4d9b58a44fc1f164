"""Per-tab navigation tracking: dedup key, sequence fence, live domain."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TabState:
    """What the coordinator remembers about one tab."""

    last_url: str | None = None  # last normalized URL looked up (dedup key)
    seq: int = 0  # bumped per lookup; a moved value means the result is stale
    registered_domain: str | None = None  # domain whose tools are live


@dataclass
class TabStateStore:
    """Tab states keyed by tab id.

    An entry is created on a tab's first navigation and dropped when the
    tab closes. `seq` survives full navigations so in-flight lookups from
    the previous page are still fenced off.
    """

    _tabs: dict[int, TabState] = field(default_factory=dict)

    def get(self, tab_id: int) -> TabState:
        state = self._tabs.get(tab_id)
        if state is None:
            state = self._tabs[tab_id] = TabState()
        return state

    def peek(self, tab_id: int) -> TabState | None:
        return self._tabs.get(tab_id)

    def reset_navigation(self, tab_id: int) -> None:
        """Forget the dedup key and live domain (full page load)."""
        state = self.get(tab_id)
        state.last_url = None
        state.registered_domain = None

    def next_seq(self, tab_id: int) -> int:
        state = self.get(tab_id)
        state.seq += 1
        return state.seq

    def is_current(self, tab_id: int, seq: int) -> bool:
        state = self._tabs.get(tab_id)
        return state is not None and state.seq == seq

    def remove(self, tab_id: int) -> None:
        self._tabs.pop(tab_id, None)

    def __contains__(self, tab_id: int) -> bool:
        return tab_id in self._tabs

    def __len__(self) -> int:
        return len(self._tabs)
