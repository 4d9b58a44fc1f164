"""Hub lookup client: fetch configs matching a domain and path."""

from __future__ import annotations

from typing import Any

import httpx

from webmcp.models import Config
from webmcp.storage import Settings


class HubClient:
    """Looks up tool configs on the hub.

    Settings are read on every call so a changed endpoint or key applies
    to the next navigation without a restart.
    """

    def __init__(
        self,
        settings: Settings,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        api_key = self.settings.get_api_key()
        return {"Authorization": f"Bearer {api_key}"} if api_key else {}

    async def lookup_config(
        self,
        domain: str,
        url: str | None = None,
        executable: bool = False,
    ) -> list[Config]:
        """GET /api/configs/lookup. Raises httpx errors on transport or HTTP failure."""
        params: dict[str, Any] = {"domain": domain}
        if url:
            params["url"] = url
        if executable:
            params["executable"] = "true"

        base = self.settings.get_hub_url().rstrip("/")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(
                f"{base}/api/configs/lookup", params=params, headers=self._headers(),
            )
            resp.raise_for_status()
            payload = resp.json()

        configs: list[Config] = []
        for raw in payload.get("configs") or []:
            try:
                configs.append(Config.from_dict(raw))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                print(f"[hub] Skipping malformed config for {domain}: {e!r}")
        return configs
