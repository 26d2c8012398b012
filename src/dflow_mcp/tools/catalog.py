"""The canonical tool catalog.

Read-only, ordered, defined at import time.  ``tools/list`` returns it
verbatim; the input schemas are advisory metadata for calling agents and are
not enforced by the dispatcher.
"""

from __future__ import annotations

from typing import Any

from dflow_mcp.protocols.errors import ToolNotFoundError
from dflow_mcp.tools.models import ToolAnnotations, ToolDescriptor

SORT_FIELDS = ["volume", "volume24h", "liquidity", "openInterest", "startDate"]


# ---------------------------------------------------------------------------
# Schema helpers
# ---------------------------------------------------------------------------


def _string(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def _integer(description: str) -> dict[str, Any]:
    return {"type": "integer", "minimum": 0, "description": description}


def _boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def _string_list(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description, **extra}


def _sort() -> dict[str, Any]:
    return _string("Sort field", enum=list(SORT_FIELDS))


def _schema(required: tuple[str, ...] = (), **properties: dict[str, Any]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(required)}


def _tool(
    name: str,
    title: str,
    description: str,
    schema: dict[str, Any],
) -> ToolDescriptor:
    return ToolDescriptor(
        name=name,
        title=title,
        description=description,
        input_schema=schema,
        annotations=ToolAnnotations(title=title),
    )


def _candle_window(interval: str) -> dict[str, dict[str, Any]]:
    return {
        "startTs": _integer("Start timestamp"),
        "endTs": _integer("End timestamp"),
        "periodInterval": _integer(interval),
    }


def _milestone_filters() -> dict[str, dict[str, Any]]:
    return {
        "minimumStartDate": _string("Filter milestones after this date"),
        "category": _string("Filter by category"),
        "competition": _string("Filter by competition"),
        "sourceId": _string("Filter by data source"),
        "type": _string("Filter by milestone type"),
    }


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

TOOLS: tuple[ToolDescriptor, ...] = (
    # Events
    _tool(
        "get_event",
        "Get Event Details",
        "Get a single event by ticker. Returns event metadata including series ticker, "
        "subtitle, markets, strike information and volume.",
        _schema(
            ("event_id",),
            event_id=_string("Event ticker"),
            withNestedMarkets=_boolean("Include nested markets (optional)"),
        ),
    ),
    _tool(
        "get_events",
        "Get Events List",
        "Get a paginated list of all events with optional filtering and sorting.",
        _schema(
            limit=_integer("Maximum number of events to return"),
            cursor=_integer("Pagination cursor"),
            withNestedMarkets=_boolean("Include nested markets"),
            seriesTickers=_string("Filter by series tickers (comma-separated)"),
            isInitialized=_boolean("Filter by initialization status"),
            status=_string("Filter by event status"),
            sort=_sort(),
        ),
    ),
    # Markets
    _tool(
        "get_market",
        "Get Market Details",
        "Get details of a market by ticker.",
        _schema(("market_id",), market_id=_string("Market ticker")),
    ),
    _tool(
        "get_market_by_mint",
        "Get Market by Mint Address",
        "Get a market by looking up its mint address.",
        _schema(("mint_address",), mint_address=_string("Ledger or outcome mint address")),
    ),
    _tool(
        "get_markets",
        "Get Markets List",
        "Get a paginated list of markets with optional filtering.",
        _schema(
            limit=_integer("Number of markets to return"),
            cursor=_integer("Pagination cursor"),
            isInitialized=_boolean("Filter by initialization status"),
            status=_string("Filter by status"),
            sort=_sort(),
        ),
    ),
    _tool(
        "get_markets_batch",
        "Get Markets Batch",
        "Get multiple markets by tickers and/or mint addresses (up to 100 results).",
        _schema(
            tickers=_string_list("Array of market tickers"),
            mints=_string_list("Array of mint addresses"),
        ),
    ),
    # Trades
    _tool(
        "get_trades",
        "Get Trades",
        "Get a paginated list of trades across markets with optional filtering.",
        _schema(
            limit=_integer("Number of trades to return"),
            cursor=_string("Pagination cursor"),
            ticker=_string("Filter by market ticker"),
            minTs=_integer("Minimum timestamp filter"),
            maxTs=_integer("Maximum timestamp filter"),
        ),
    ),
    _tool(
        "get_trades_by_mint",
        "Get Trades by Mint Address",
        "Get trades for a market identified by a mint address.",
        _schema(
            ("mint_address",),
            mint_address=_string("Mint address"),
            limit=_integer("Number of trades to return"),
            cursor=_string("Pagination cursor"),
            minTs=_integer("Minimum timestamp filter"),
            maxTs=_integer("Maximum timestamp filter"),
        ),
    ),
    # Forecasts
    _tool(
        "get_forecast_percentile_history",
        "Get Forecast Percentile History",
        "Get historical raw and formatted forecast numbers for an event at specified "
        "percentiles.",
        _schema(
            ("series_ticker", "event_id", "percentiles", "startTs", "endTs", "periodInterval"),
            series_ticker=_string("Series ticker"),
            event_id=_string("Event ticker"),
            percentiles=_string("Comma-separated list of percentiles"),
            **_candle_window("Sampling interval in seconds"),
        ),
    ),
    _tool(
        "get_forecast_percentile_history_by_mint",
        "Get Forecast Percentile History by Mint",
        "Get forecast history by looking up an event using a market mint address.",
        _schema(
            ("mint_address", "percentiles", "startTs", "endTs", "periodInterval"),
            mint_address=_string("Market mint address"),
            percentiles=_string("Comma-separated list of percentiles"),
            **_candle_window("Sampling interval in seconds"),
        ),
    ),
    # Candlesticks
    _tool(
        "get_event_candlesticks",
        "Get Event Candlesticks",
        "Get event candlesticks from the Kalshi API. Resolves series ticker automatically.",
        _schema(
            ("ticker", "startTs", "endTs", "periodInterval"),
            ticker=_string("Event ticker"),
            **_candle_window("Interval size in seconds"),
        ),
    ),
    _tool(
        "get_market_candlesticks",
        "Get Market Candlesticks",
        "Get market candlesticks. Resolves series ticker automatically.",
        _schema(
            ("ticker", "startTs", "endTs", "periodInterval"),
            ticker=_string("Market ticker"),
            **_candle_window("Interval size in seconds"),
        ),
    ),
    _tool(
        "get_market_candlesticks_by_mint",
        "Get Market Candlesticks by Mint",
        "Get candlesticks by looking up a market by mint address.",
        _schema(
            ("mint_address", "startTs", "endTs", "periodInterval"),
            mint_address=_string("Mint address"),
            **_candle_window("Interval size in seconds"),
        ),
    ),
    # Live data
    _tool(
        "get_live_data",
        "Get Live Data",
        "Get live data from the Kalshi API for specific milestones.",
        _schema(("milestoneIds",), milestoneIds=_string_list("Array of milestone IDs")),
    ),
    _tool(
        "get_live_data_by_event",
        "Get Live Data by Event",
        "Get live data for all milestones of an event.",
        _schema(
            ("event_ticker",),
            event_ticker=_string("Event ticker"),
            **_milestone_filters(),
        ),
    ),
    _tool(
        "get_live_data_by_mint",
        "Get Live Data by Mint Address",
        "Get live data by looking up an event from a market mint address.",
        _schema(
            ("mint_address",),
            mint_address=_string("Mint address"),
            **_milestone_filters(),
        ),
    ),
    # Series
    _tool(
        "get_series",
        "Get Series Templates",
        "Get all series templates with optional filtering.",
        _schema(
            category=_string("Filter by series category"),
            tags=_string("Filter by tags"),
            isInitialized=_boolean("Filter by initialization status"),
            status=_string("Filter by series status"),
        ),
    ),
    _tool(
        "get_series_by_ticker",
        "Get Series by Ticker",
        "Get a single series by its ticker.",
        _schema(("series_ticker",), series_ticker=_string("Series ticker")),
    ),
    # Utility
    _tool(
        "get_outcome_mints",
        "Get Outcome Mints",
        "Get a flat list of yes and no outcome mint pubkeys.",
        _schema(minCloseTs=_integer("Filter by minimum close timestamp")),
    ),
    _tool(
        "filter_outcome_mints",
        "Filter Outcome Mints",
        "Filter a list of addresses and return only outcome mints.",
        _schema(
            ("addresses",),
            addresses=_string_list("Array of addresses to filter", maxItems=200),
        ),
    ),
    _tool(
        "get_tags_by_categories",
        "Get Tags by Categories",
        "Get a mapping of series categories to tags.",
        _schema(),
    ),
    _tool(
        "get_filters_by_sports",
        "Get Filters by Sports",
        "Get filtering options for each sport including scopes and competitions.",
        _schema(),
    ),
    _tool(
        "search_events",
        "Search Events",
        "Search events with nested markets by title or ticker.",
        _schema(
            ("q",),
            q=_string("Search query"),
            sort=_sort(),
            order=_string("Sort order", enum=["desc", "asc"]),
            limit=_integer("Number of results to return"),
            cursor=_integer("Pagination cursor"),
            withNestedMarkets=_boolean("Include nested markets"),
            withMarketAccounts=_boolean("Include market accounts"),
        ),
    ),
)

_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}


def list_tools() -> tuple[ToolDescriptor, ...]:
    """Return the full catalog in advertisement order."""
    return TOOLS


def tool_names() -> list[str]:
    return [tool.name for tool in TOOLS]


def get_tool(name: str) -> ToolDescriptor:
    """Look up one descriptor by name."""
    tool = _BY_NAME.get(name)
    if tool is None:
        raise ToolNotFoundError(name)
    return tool
