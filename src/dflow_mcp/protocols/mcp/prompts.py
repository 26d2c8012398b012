"""Prompt templates advertised through ``prompts/list``."""

from __future__ import annotations

from typing import Any

from dflow_mcp.protocols.errors import INVALID_PARAMS, JsonRpcError

PROMPTS: tuple[dict[str, Any], ...] = (
    {
        "name": "analyze_market_trends",
        "description": (
            "Analyze prediction market trends and provide insights on volume, "
            "liquidity, and price movements"
        ),
        "arguments": [
            {
                "name": "market_filter",
                "description": "Filter markets by category (e.g., politics, sports, crypto)",
                "required": False,
            },
            {
                "name": "time_range",
                "description": "Time range for analysis (e.g., 24h, 7d, 30d)",
                "required": False,
            },
        ],
    },
    {
        "name": "compare_events",
        "description": "Compare multiple prediction market events side-by-side",
        "arguments": [
            {
                "name": "event_ids",
                "description": "Comma-separated list of event tickers to compare",
                "required": True,
            },
        ],
    },
)


def list_prompts() -> dict[str, Any]:
    return {"prompts": [dict(p) for p in PROMPTS]}


def _user_message(text: str) -> dict[str, Any]:
    return {"role": "user", "content": {"type": "text", "text": text}}


def get_prompt(name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """Render the named prompt into a single user message."""
    args = arguments or {}

    if name == "analyze_market_trends":
        market_filter = args.get("market_filter") or "all markets"
        time_range = args.get("time_range") or "24h"
        text = (
            f"Analyze prediction market trends for {market_filter} over the past "
            f"{time_range}. Use get_events and get_markets tools to gather data, then "
            "provide insights on volume trends, liquidity patterns, and notable price "
            "movements."
        )
        return {"messages": [_user_message(text)]}

    if name == "compare_events":
        event_ids = args.get("event_ids") or ""
        text = (
            f"Compare the following prediction market events: {event_ids}. Use get_event "
            "tool for each event and provide a side-by-side comparison of volume, "
            "liquidity, markets, and recent activity."
        )
        return {"messages": [_user_message(text)]}

    raise JsonRpcError(INVALID_PARAMS, f"Unknown prompt: {name}")
