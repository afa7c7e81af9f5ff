"""
Endpoint smoke check: hits the three public data endpoints once and prints
what came back: ticker (raw and normalized), latest Fear & Greed reading,
and the history summary. No model call, nothing published.

Run with:
    python scripts/verify_endpoints.py
"""

import logging
from dotenv import load_dotenv

load_dotenv()

# Show INFO logs on console for verification
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)

from crypto_narrator.core.config import Settings, load_config  # noqa: E402
from crypto_narrator.core.errors import PipelineError  # noqa: E402
from crypto_narrator.pipeline.indicators import summarize_bars  # noqa: E402
from crypto_narrator.pipeline.normalizer import normalize_ticker  # noqa: E402
from crypto_narrator.providers.market import BinanceTickerProvider, CryptoCompareHistoryProvider  # noqa: E402
from crypto_narrator.providers.sentiment import FearGreedProvider  # noqa: E402

DIVIDER = "=" * 70


def main() -> int:
    settings = Settings.from_dict(load_config())
    failures = 0

    print(f"\n{DIVIDER}")
    print(f"  Endpoint verification  |  symbol={settings.symbol}")
    print(DIVIDER)

    try:
        raw = BinanceTickerProvider(url=settings.ticker_url).fetch_ticker(settings.symbol)
        norm = normalize_ticker(raw)
        print(f"  TICKER     : last={raw.last_price} -> {norm.last_price}  chg={norm.price_change_percent}%")
        print(f"               high={norm.high_price} low={norm.low_price} vol={norm.volume}/{norm.quote_volume}")
    except PipelineError as exc:
        print(f"  TICKER     : FAILED ({exc})")
        failures += 1

    try:
        samples = FearGreedProvider(url=settings.sentiment_url).fetch_samples(settings.sentiment_limit)
        latest = f"{samples[0].value} ({samples[0].classification})" if samples else "(none)"
        print(f"  SENTIMENT  : {len(samples)} samples, latest {latest}")
    except PipelineError as exc:
        print(f"  SENTIMENT  : FAILED ({exc})")
        failures += 1

    try:
        bars = CryptoCompareHistoryProvider(url=settings.history_url).fetch_bars(
            settings.base_asset, settings.history_quote, settings.history_days,
        )
        summary = summarize_bars(bars)
        print(f"  HISTORY    : {summary['periods']} bars, {summary['first_close']} -> "
              f"{summary['last_close']} ({summary['change_pct']}%, {summary['trend']})")
    except PipelineError as exc:
        print(f"  HISTORY    : FAILED ({exc})")
        failures += 1

    print(DIVIDER)
    print(f"  {3 - failures}/3 endpoints OK")
    print()
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
