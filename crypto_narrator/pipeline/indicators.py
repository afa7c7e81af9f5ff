"""History summary handed to the predictive prompt.

The model gets a handful of computed figures instead of the raw bar list:
window change, last-week change, average volumes and a coarse trend label.
"""

from typing import Any, Dict, List

import pandas as pd

from crypto_narrator.models.datatypes import HistoricalBar

TREND_THRESHOLD_PCT = 2.0
_SHORT_WINDOW = 7


def bars_to_frame(bars: List[HistoricalBar]) -> pd.DataFrame:
    """Build a DataFrame indexed by UTC date with Close, Volume_From, Volume_To and Pct_Change."""
    if not bars:
        return pd.DataFrame(columns=["Close", "Volume_From", "Volume_To", "Pct_Change"])

    df = pd.DataFrame(
        {
            "Date": pd.to_datetime([bar.time for bar in bars], unit="s", utc=True),
            "Close": [bar.close for bar in bars],
            "Volume_From": [bar.volume_from for bar in bars],
            "Volume_To": [bar.volume_to for bar in bars],
        }
    )
    df = df.sort_values("Date").set_index("Date")
    df["Close"] = pd.to_numeric(df["Close"], errors="coerce")

    # (Close - Prev Close) / Prev Close * 100
    df["Pct_Change"] = df["Close"].pct_change() * 100.0
    return df


def _change_pct(first: float, last: float) -> float | None:
    if pd.isna(first) or pd.isna(last) or first == 0:
        return None
    return round((float(last) - float(first)) / abs(float(first)) * 100.0, 2)


def trend_label(change_pct: float | None) -> str:
    """``alta`` / ``baixa`` / ``lateral`` by the window change, ``indefinida`` without data."""
    if change_pct is None:
        return "indefinida"
    if change_pct >= TREND_THRESHOLD_PCT:
        return "alta"
    if change_pct <= -TREND_THRESHOLD_PCT:
        return "baixa"
    return "lateral"


def summarize_bars(bars: List[HistoricalBar]) -> Dict[str, Any]:
    """
    Summarize trailing bars.

    Returns:
        Dict[str, Any]: ``periods``, ``first_close``, ``last_close``,
        ``change_pct``, ``change_7d_pct``, ``max_close``, ``min_close``,
        ``avg_volume_from``, ``avg_volume_to``, ``trend``. Numeric values
        are ``None`` when there are no bars.
    """
    df = bars_to_frame(bars)
    if df.empty:
        return {
            "periods": 0,
            "first_close": None,
            "last_close": None,
            "change_pct": None,
            "change_7d_pct": None,
            "max_close": None,
            "min_close": None,
            "avg_volume_from": None,
            "avg_volume_to": None,
            "trend": trend_label(None),
        }

    closes = df["Close"]
    change = _change_pct(closes.iloc[0], closes.iloc[-1])
    short = closes.iloc[-(_SHORT_WINDOW + 1):]
    change_7d = _change_pct(short.iloc[0], short.iloc[-1]) if len(short) > 1 else None

    return {
        "periods": int(len(df)),
        "first_close": round(float(closes.iloc[0]), 2),
        "last_close": round(float(closes.iloc[-1]), 2),
        "change_pct": change,
        "change_7d_pct": change_7d,
        "max_close": round(float(closes.max()), 2),
        "min_close": round(float(closes.min()), 2),
        "avg_volume_from": round(float(df["Volume_From"].mean()), 2),
        "avg_volume_to": round(float(df["Volume_To"].mean()), 2),
        "trend": trend_label(change),
    }
