"""Runtime configuration: hub endpoint, credentials, timeouts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_HUB_URL = "https://webmcp-hub.com"


def _default_settings_path() -> Path:
    return Path.home() / ".config" / "webmcp-hub" / "settings.json"


@dataclass
class HubConfig:
    """Configuration for lookups and tool execution."""

    hub_url: str = DEFAULT_HUB_URL
    api_key: str = ""
    settings_path: Path = field(default_factory=_default_settings_path)
    wait_timeout: float = 5000  # ms, wait steps and result waits
    click_timeout: float = 5000  # ms, click target readiness
    evaluate_timeout: float = 8.0  # s, inline evaluate steps
    lookup_timeout: float = 10.0  # s, hub HTTP requests
    headless: bool = True

    @classmethod
    def from_env(cls) -> "HubConfig":
        """Read WEBMCP_* variables (call load_dotenv() first to pick up .env)."""
        config = cls()
        config.hub_url = os.environ.get("WEBMCP_HUB_URL", "") or config.hub_url
        config.api_key = os.environ.get("WEBMCP_API_KEY", "")
        path = os.environ.get("WEBMCP_SETTINGS_PATH")
        if path:
            config.settings_path = Path(path).expanduser()
        return config
