"""Fixed-precision rendering of ticker numbers.

The narrator is told to copy numbers verbatim, so whatever this module
produces ends up in the final text and in the extracted fields. All fields
use the same rule: two decimal places, ROUND_HALF_UP.
"""

import dataclasses
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterable, Mapping

from crypto_narrator.core.errors import ParseError
from crypto_narrator.models.datatypes import TickerSnapshot

TWO_PLACES = Decimal("0.01")

# Binance ticker keys rendered by normalize_fields
TICKER_NUMERIC_FIELDS = (
    "lastPrice",
    "priceChangePercent",
    "volume",
    "quoteVolume",
    "highPrice",
    "lowPrice",
)

_SNAPSHOT_NUMERIC_FIELDS = (
    "last_price",
    "price_change_percent",
    "volume",
    "quote_volume",
    "high_price",
    "low_price",
)


def normalize_decimal(value: Any) -> str:
    """Render ``value`` with exactly two decimals.

    Examples:
        ``"97000.1"`` → ``"97000.10"``, ``"1234.5678"`` → ``"1234.57"``,
        ``"-0.005"`` → ``"-0.01"``.

    Raises:
        ParseError: ``value`` is not a finite decimal number.
    """
    if isinstance(value, bool):
        raise ParseError(f"Not a number: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ParseError(f"Not a number: {value!r}") from exc
    if not number.is_finite():
        raise ParseError(f"Not a finite number: {value!r}")
    with localcontext() as ctx:
        # integer digits and two decimals, plus one for a rounding carry
        ctx.prec = max(ctx.prec, number.adjusted() + 4)
        try:
            return str(number.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
        except InvalidOperation as exc:
            # exponent beyond the context limits
            raise ParseError(f"Number out of range: {value!r}") from exc


def normalize_fields(
    payload: Mapping[str, Any],
    fields: Iterable[str] = TICKER_NUMERIC_FIELDS,
) -> Dict[str, Any]:
    """Return a copy of ``payload`` with every listed field that is present normalized.

    Keys not listed (``symbol``, ...) pass through untouched, so the key set
    never changes.
    """
    result = dict(payload)
    for name in fields:
        if name in result:
            result[name] = normalize_decimal(result[name])
    return result


def normalize_ticker(snapshot: TickerSnapshot) -> TickerSnapshot:
    """Return a copy of ``snapshot`` with every numeric field normalized."""
    values = {name: normalize_decimal(getattr(snapshot, name)) for name in _SNAPSHOT_NUMERIC_FIELDS}
    return dataclasses.replace(snapshot, **values)


def snapshot_to_payload(snapshot: TickerSnapshot) -> Dict[str, str]:
    """Binance-keyed dict of a snapshot's numeric fields, as embedded in prompts."""
    return {
        "symbol": snapshot.symbol,
        "lastPrice": snapshot.last_price,
        "priceChangePercent": snapshot.price_change_percent,
        "volume": snapshot.volume,
        "quoteVolume": snapshot.quote_volume,
        "highPrice": snapshot.high_price,
        "lowPrice": snapshot.low_price,
    }
