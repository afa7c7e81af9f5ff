"""Market data integration: Binance 24h ticker and CryptoCompare daily history."""

from typing import Any, List, Optional

import requests

from crypto_narrator.core.config import DEFAULT_HISTORY_URL, DEFAULT_TICKER_URL
from crypto_narrator.core.errors import DecodeError, NetworkError, ParseError
from crypto_narrator.core.logger import logger
from crypto_narrator.models.datatypes import HistoricalBar, TickerSnapshot
from crypto_narrator.providers.base import HistoryProvider, TickerProvider
from crypto_narrator.providers.http import fetch_json

# Binance JSON key -> TickerSnapshot attribute
TICKER_KEYS = {
    "lastPrice": "last_price",
    "highPrice": "high_price",
    "lowPrice": "low_price",
    "priceChangePercent": "price_change_percent",
    "volume": "volume",
    "quoteVolume": "quote_volume",
}


class BinanceTickerProvider(TickerProvider):
    """Binance spot ``/api/v3/ticker/24hr`` implementation."""

    def __init__(self, url: str = DEFAULT_TICKER_URL, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.session = session

    def fetch_ticker(self, symbol: str) -> TickerSnapshot:
        """
        Fetch the 24h ticker for ``symbol``.

        Args:
            symbol (str): Exchange pair symbol, e.g. ``BTCUSDT``.

        Returns:
            TickerSnapshot: Raw snapshot with the exchange's decimal strings.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            DecodeError: Invalid JSON or a required key is missing.
        """
        symbol = symbol.upper()
        logger.info(f"Fetching 24h ticker for {symbol}")
        data = fetch_json(self.url, params={"symbol": symbol}, session=self.session)
        return ticker_from_payload(data, symbol)


def ticker_from_payload(data: Any, symbol: str = "") -> TickerSnapshot:
    """Build a :class:`TickerSnapshot` from a Binance ticker object."""
    if not isinstance(data, dict):
        raise DecodeError(f"Expected ticker object, got {type(data).__name__}")
    missing = [key for key in TICKER_KEYS if key not in data]
    if missing:
        raise DecodeError(f"Ticker payload missing keys: {missing}")
    values = {attr: str(data[key]) for key, attr in TICKER_KEYS.items()}
    return TickerSnapshot(symbol=str(data.get("symbol") or symbol), **values)


class CryptoCompareHistoryProvider(HistoryProvider):
    """CryptoCompare ``/data/v2/histoday`` implementation."""

    def __init__(self, url: str = DEFAULT_HISTORY_URL, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.session = session

    def fetch_bars(self, base: str, quote: str, days: int) -> List[HistoricalBar]:
        """
        Fetch trailing daily bars.

        CryptoCompare returns ``limit + 1`` bars (the current, still open day
        included); only the last ``days`` are kept.

        Args:
            base (str): Asset symbol, e.g. ``BTC``.
            quote (str): Quote currency, e.g. ``USD``.
            days (int): Number of trailing periods.

        Returns:
            List[HistoricalBar]: Bars ordered oldest first.

        Raises:
            NetworkError: Transport failure, non-2xx status, or an API-level error response.
            DecodeError: Invalid JSON or unexpected payload shape.
            ParseError: A bar holds a non-numeric value.
        """
        logger.info(f"Fetching {days} daily bars for {base}/{quote}")
        payload = fetch_json(
            self.url,
            params={"fsym": base.upper(), "tsym": quote.upper(), "limit": days},
            session=self.session,
        )
        rows = _history_rows(payload, self.url)
        bars = [_bar_from_row(row) for row in rows]
        return bars[-days:] if days > 0 else []


def _history_rows(payload: Any, url: str) -> List[dict]:
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected history object, got {type(payload).__name__}")
    if payload.get("Response") == "Error":
        message = payload.get("Message", "unknown error")
        logger.error(f"CryptoCompare error response: {message}")
        raise NetworkError(f"CryptoCompare error: {message}", url=url)

    data = payload.get("Data")
    # v2 nests the bars one level deeper than v1
    if isinstance(data, dict):
        data = data.get("Data")
    if not isinstance(data, list):
        raise DecodeError("History payload has no 'Data' list")
    return data


def _bar_from_row(row: Any) -> HistoricalBar:
    if not isinstance(row, dict):
        raise DecodeError(f"Expected bar object, got {type(row).__name__}")
    try:
        return HistoricalBar(
            time=int(row["time"]),
            close=float(row["close"]),
            volume_from=float(row.get("volumefrom", 0.0)),
            volume_to=float(row.get("volumeto", 0.0)),
        )
    except KeyError as exc:
        raise DecodeError(f"Bar missing key {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Non-numeric bar value in {row}: {exc}") from exc
