"""Key-value stores and the two persisted settings.

Two lifetimes: a durable JSON file for settings, and an in-memory store
for per-tab registration results that lives as long as the browser
session does.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from webmcp.config import DEFAULT_HUB_URL, HubConfig


@dataclass
class MemoryStore:
    """Session-scoped store. Cleared when the process exits."""

    _data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


@dataclass
class JsonFileStore:
    """Durable store backed by a single JSON object on disk."""

    path: Path

    def _load(self) -> dict[str, Any]:
        try:
            return json.loads(self.path.read_text())
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            print(f"[storage] Ignoring unreadable settings file {self.path}: {e}")
            return {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())


class Settings:
    """Hub endpoint override and optional bearer credential.

    Values saved in the durable store win; the config (defaults plus
    environment) fills in whatever was never saved.
    """

    def __init__(self, store: JsonFileStore | MemoryStore, config: HubConfig | None = None) -> None:
        self.store = store
        self.config = config or HubConfig()

    def get_hub_url(self) -> str:
        return self.store.get("hubUrl") or self.config.hub_url or DEFAULT_HUB_URL

    def set_hub_url(self, url: str) -> None:
        self.store.set("hubUrl", url.strip().rstrip("/"))

    def get_api_key(self) -> str:
        return self.store.get("apiKey") or self.config.api_key

    def set_api_key(self, key: str) -> None:
        if key:
            self.store.set("apiKey", key)
        else:
            self.store.remove("apiKey")


def session_key(tab_id: int) -> str:
    return f"tab-{tab_id}"
