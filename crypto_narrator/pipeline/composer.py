"""Shape an analysis into a reply chain that fits the sink's length cap."""

from typing import List, Optional, Sequence

from crypto_narrator.models.datatypes import ExtractedAnalysis

MISSING = "N/A"
_LIST_ITEMS = 2


def _show(value: Optional[str]) -> str:
    return value if value else MISSING


def _bullets(items: Optional[List[str]]) -> str:
    if not items:
        return f"• {MISSING}"
    return "\n".join(f"• {item}" for item in items[:_LIST_ITEMS])


def compose_thread(analysis: ExtractedAnalysis, asset_name: str = "Bitcoin", asset_tag: str = "BTC") -> List[str]:
    """Build the four-message chain: market data, technical data, supporting factors, risks."""
    return [
        f"#{asset_name} Market Data 📊\n"
        f"Current Price: ${_show(analysis.current_price)}\n"
        f"Target Analysis: {_show(analysis.target_range)} by {_show(analysis.target_date)}\n"
        f"Confidence Level: {_show(analysis.confidence)}\n"
        f"#{asset_tag} #Crypto",

        f"#{asset_tag} Technical Data 📈\n"
        f"Fear & Greed: {_show(analysis.fear_greed_value)} ({_show(analysis.fear_greed_label)})\n"
        f"Market Trend: {_show(analysis.trend)}\n"
        f"#{asset_name} #Trading",

        f"Supporting Data for #{asset_name}:\n"
        f"{_bullets(analysis.supporting_factors)}\n"
        f"#{asset_tag} #CryptoAnalysis",

        f"#{asset_tag} Risk Factors:\n"
        f"{_bullets(analysis.key_risks)}\n"
        f"#{asset_name} #CryptoMarkets",
    ]


def split_message(text: str, max_length: int) -> List[str]:
    """Split ``text`` into chunks of at most ``max_length`` characters.

    Breaks on whitespace (newlines preferred over spaces); a single word
    longer than the cap is cut hard.
    """
    if max_length < 1:
        raise ValueError(f"max_length must be >= 1, got {max_length}")
    text = text.strip()
    if len(text) <= max_length:
        return [text] if text else []

    chunks: List[str] = []
    rest = text
    while len(rest) > max_length:
        window = rest[:max_length + 1]
        cut = window.rfind("\n")
        if cut <= 0:
            cut = window.rfind(" ")
        if cut <= 0:
            cut = max_length
        chunk = rest[:cut].rstrip()
        if chunk:
            chunks.append(chunk)
        rest = rest[cut:].lstrip()
    if rest:
        chunks.append(rest)
    return chunks


def fit_messages(messages: Sequence[str], max_length: int) -> List[str]:
    """Split every over-long message in place, keeping overall order."""
    fitted: List[str] = []
    for message in messages:
        fitted.extend(split_message(message, max_length))
    return fitted
