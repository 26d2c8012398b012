"""Routing table from tool name to REST endpoint.

Path placeholders are filled by plain string substitution; callers are
responsible for passing valid identifiers.  The ``by-mint`` routes hand the
mint-address indirection to the upstream API rather than resolving it here.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from dflow_mcp.tools.models import RouteRule

_API = "/api/v1"

ROUTES: Mapping[str, RouteRule] = MappingProxyType({
    # Events
    "get_event": RouteRule(path=f"{_API}/event/{{event_id}}", forward=("withNestedMarkets",)),
    "get_events": RouteRule(path=f"{_API}/events"),
    # Markets
    "get_market": RouteRule(path=f"{_API}/market/{{market_id}}", forward=()),
    "get_market_by_mint": RouteRule(path=f"{_API}/market/by-mint/{{mint_address}}", forward=()),
    "get_markets": RouteRule(path=f"{_API}/markets"),
    "get_markets_batch": RouteRule(method="POST", path=f"{_API}/markets/batch"),
    # Trades
    "get_trades": RouteRule(path=f"{_API}/trades"),
    "get_trades_by_mint": RouteRule(path=f"{_API}/trades/by-mint/{{mint_address}}"),
    # Forecasts
    "get_forecast_percentile_history": RouteRule(
        path=f"{_API}/event/{{series_ticker}}/{{event_id}}/forecast_percentile_history",
    ),
    "get_forecast_percentile_history_by_mint": RouteRule(
        path=f"{_API}/event/by-mint/{{mint_address}}/forecast_percentile_history",
    ),
    # Candlesticks
    "get_event_candlesticks": RouteRule(path=f"{_API}/event/{{ticker}}/candlesticks"),
    "get_market_candlesticks": RouteRule(path=f"{_API}/market/{{ticker}}/candlesticks"),
    "get_market_candlesticks_by_mint": RouteRule(
        path=f"{_API}/market/by-mint/{{mint_address}}/candlesticks",
    ),
    # Live data
    "get_live_data": RouteRule(path=f"{_API}/live_data", forward=("milestoneIds",)),
    "get_live_data_by_event": RouteRule(path=f"{_API}/live_data/by-event/{{event_ticker}}"),
    "get_live_data_by_mint": RouteRule(path=f"{_API}/live_data/by-mint/{{mint_address}}"),
    # Series
    "get_series": RouteRule(path=f"{_API}/series"),
    "get_series_by_ticker": RouteRule(path=f"{_API}/series/{{series_ticker}}", forward=()),
    # Utility
    "get_outcome_mints": RouteRule(path=f"{_API}/outcome_mints"),
    "filter_outcome_mints": RouteRule(method="POST", path=f"{_API}/filter_outcome_mints"),
    "get_tags_by_categories": RouteRule(path=f"{_API}/tags_by_categories", forward=()),
    "get_filters_by_sports": RouteRule(path=f"{_API}/filters_by_sports", forward=()),
    "search_events": RouteRule(path=f"{_API}/search"),
})
