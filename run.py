"""Entry point: uv run run.py open <url> | uv run run.py settings"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Ensure src/ is on the path for direct execution
sys.path.insert(0, str(Path(__file__).parent / "src"))

from dotenv import load_dotenv


async def open_page(args: argparse.Namespace) -> int:
    from webmcp.agent import Agent
    from webmcp.config import HubConfig
    from webmcp.executor import result_text
    from webmcp.host import AutoApproveAgent, PageConfirmAgent

    config = HubConfig.from_env()
    config.headless = not args.no_headless

    async with Agent(config, accept_dialogs=args.yes) as agent:
        tab_id = await agent.open_tab(args.url)
        tools = await agent.wait_for_tools(tab_id, timeout=args.wait)
        print(agent.tab_status(tab_id))
        for tool in tools:
            print(f"  - {tool.name}: {tool.description}")

        if not args.tool:
            return 0

        params = json.loads(args.params) if args.params else {}
        gate = AutoApproveAgent() if args.yes else PageConfirmAgent()
        result = await agent.call_tool(tab_id, args.tool, params, gate)
        print(result_text(result))
        session = agent.sessions.get(tab_id)
        if session:
            session.host.metrics.print_report()
            return 0 if session.host.metrics.calls_failed == 0 else 1
        return 1


def show_settings(args: argparse.Namespace) -> int:
    from webmcp.config import HubConfig
    from webmcp.storage import JsonFileStore, Settings

    config = HubConfig.from_env()
    settings = Settings(JsonFileStore(config.settings_path), config)
    if args.hub_url is not None:
        settings.set_hub_url(args.hub_url)
    if args.api_key is not None:
        settings.set_api_key(args.api_key)
    print(f"Hub URL: {settings.get_hub_url()}")
    print(f"API key: {'set' if settings.get_api_key() else 'not set'}")
    print(f"Settings file: {config.settings_path}")
    return 0


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Run WebMCP hub tools against live pages")
    sub = parser.add_subparsers(dest="command", required=True)

    p_open = sub.add_parser("open", help="Open a page and register its hub tools")
    p_open.add_argument("url", type=str, help="Page URL")
    p_open.add_argument("--no-headless", action="store_true", help="Run with visible browser")
    p_open.add_argument("--tool", type=str, default=None, help="Tool to run once registered")
    p_open.add_argument("--params", type=str, default=None, help="Tool parameters as JSON")
    p_open.add_argument("--yes", action="store_true", help="Approve destructive tools")
    p_open.add_argument("--wait", type=float, default=10_000, help="ms to wait for tools")

    p_settings = sub.add_parser("settings", help="Show or change hub settings")
    p_settings.add_argument("--hub-url", type=str, default=None)
    p_settings.add_argument("--api-key", type=str, default=None, help="Empty string clears it")

    args = parser.parse_args()
    if args.command == "settings":
        return show_settings(args)
    return asyncio.run(open_page(args))


if __name__ == "__main__":
    sys.exit(main())
