"""Pipeline engine: one strictly sequential narrator run.

Flow:
  1. Ticker     : fetch_ticker → normalize_ticker
  2. Realtime   : narrator report from the normalized ticker
  3. Extract    : ReportedTicker from the realtime text
  4. Context    : Fear & Greed samples + daily bars → history summary
  5. Prediction : narrator report for (target_price, target_date)
  6. Extract    : ExtractedAnalysis; target range/date come from the caller
  7. Validate   : every FAIL line is logged as a warning
  8. Compose    : four-message reply chain fitted to the length cap
  9. Publish    : through the configured sink, or printed when disabled

Any exception aborts the run and propagates to the caller.
"""

from typing import List, Optional

from crypto_narrator.core.config import Settings
from crypto_narrator.core.logger import logger
from crypto_narrator.core.pacing import IntervalGate
from crypto_narrator.models.datatypes import PipelineResult
from crypto_narrator.pipeline.composer import compose_thread, fit_messages
from crypto_narrator.pipeline.extractor import extract_analysis, extract_reported_ticker
from crypto_narrator.pipeline.indicators import summarize_bars
from crypto_narrator.pipeline.normalizer import normalize_ticker
from crypto_narrator.pipeline.prompts import prediction_prompts, realtime_prompts
from crypto_narrator.pipeline.validator import validate_analysis, validate_reported_ticker
from crypto_narrator.providers.base import HistoryProvider, SentimentProvider, TickerProvider
from crypto_narrator.providers.llm import Narrator, OpenAIChatProvider
from crypto_narrator.providers.market import BinanceTickerProvider, CryptoCompareHistoryProvider
from crypto_narrator.providers.publisher import ConsoleSink, ThreadPublisher, XSink
from crypto_narrator.providers.sentiment import FearGreedProvider


class PipelineEngine:
    """Orchestrates fetch → normalize → narrate → extract → compose → publish.

    Args:
        settings: Parsed configuration.
        ticker / history / sentiment: Data providers; built from ``settings`` when omitted.
        narrator: Model wrapper; an :class:`OpenAIChatProvider` is built when omitted.
        publisher: Reply-chain publisher; only used when ``settings.publish_enabled``.
    """

    def __init__(
        self,
        settings: Settings,
        ticker: Optional[TickerProvider] = None,
        history: Optional[HistoryProvider] = None,
        sentiment: Optional[SentimentProvider] = None,
        narrator: Optional[Narrator] = None,
        publisher: Optional[ThreadPublisher] = None,
    ) -> None:
        self.settings = settings
        self.ticker = ticker or BinanceTickerProvider(url=settings.ticker_url)
        self.history = history or CryptoCompareHistoryProvider(url=settings.history_url)
        self.sentiment = sentiment or FearGreedProvider(url=settings.sentiment_url)
        self.narrator = narrator or Narrator(_build_chat_provider(settings))
        self.publisher = publisher
        if self.publisher is None and settings.publish_enabled:
            self.publisher = _build_publisher(settings)

    # ── public ────────────────────────────────────────────────────────────────

    def run(self, target_price: str, target_date: str) -> PipelineResult:
        """Run the pipeline once for a price target and a date.

        Args:
            target_price: Target price or range as text, e.g. ``"$97k-$100k"``.
            target_date: Target date as text, e.g. ``"31 de dezembro de 2024"``.

        Returns:
            PipelineResult: Everything produced along the way.
        """
        s = self.settings
        warnings: List[str] = []
        logger.info(f"PipelineEngine: {s.symbol} target={target_price} by {target_date}")

        # ── Ticker ────────────────────────────────────────────────────────────
        snapshot = self.ticker.fetch_ticker(s.symbol)
        normalized = normalize_ticker(snapshot)
        logger.info(
            f"PipelineEngine: {normalized.symbol} last={normalized.last_price} "
            f"chg={normalized.price_change_percent}% high={normalized.high_price} "
            f"low={normalized.low_price}"
        )

        # ── Realtime report ───────────────────────────────────────────────────
        system, user = realtime_prompts(normalized, s.asset_name, s.base_asset, s.quote_asset)
        realtime = self.narrator.narrate("realtime", system, user, temperature=s.realtime_temperature)
        reported = extract_reported_ticker(realtime.text, s.base_asset, s.quote_asset)
        warnings.extend(self._check(*validate_reported_ticker(reported, normalized)))

        # ── Context ───────────────────────────────────────────────────────────
        samples = self.sentiment.fetch_samples(s.sentiment_limit)
        bars = self.history.fetch_bars(s.base_asset, s.history_quote, s.history_days)
        summary = summarize_bars(bars)
        logger.info(
            f"PipelineEngine: {summary['periods']} bars, change={summary['change_pct']}% "
            f"trend={summary['trend']}"
        )

        # ── Prediction report ─────────────────────────────────────────────────
        system, user = prediction_prompts(
            s.asset_name, target_price, target_date, samples, summary, s.history_quote,
        )
        prediction = self.narrator.narrate("prediction", system, user, temperature=s.prediction_temperature)
        analysis = extract_analysis(prediction.text, current_price=reported.last_price)
        analysis.target_range = target_price
        analysis.target_date = target_date
        warnings.extend(self._check(*validate_analysis(analysis)))

        # ── Compose + publish ─────────────────────────────────────────────────
        messages = fit_messages(
            compose_thread(analysis, s.asset_name, s.base_asset),
            s.max_message_length,
        )
        publish_results = []
        if self.publisher is not None:
            publish_results = self.publisher.publish_sequence(messages)
        else:
            for message in messages:
                logger.info(f"PipelineEngine: message\n{message}")

        logger.info(
            f"PipelineEngine: done, {len(messages)} messages, {len(warnings)} extraction warning(s)"
        )
        return PipelineResult(
            snapshot=snapshot,
            normalized=normalized,
            realtime_report=realtime,
            reported_ticker=reported,
            sentiment=samples,
            bars=bars,
            prediction_report=prediction,
            analysis=analysis,
            messages=messages,
            publish_results=publish_results,
            warnings=warnings,
        )

    # ── internal ──────────────────────────────────────────────────────────────

    @staticmethod
    def _check(passed: bool, messages: List[str]) -> List[str]:
        """Log validator lines; return the FAIL ones."""
        failures = []
        for msg in messages:
            if msg.startswith("FAIL"):
                logger.warning(f"PipelineEngine: {msg}")
                failures.append(msg)
            else:
                logger.info(f"PipelineEngine: {msg}")
        return failures


# ── helpers ───────────────────────────────────────────────────────────────────

def _build_chat_provider(settings: Settings) -> OpenAIChatProvider:
    api_key = settings.api_key
    if not api_key:
        raise ValueError(f"{settings.api_key_env} is not set")
    return OpenAIChatProvider(
        api_key=api_key,
        base_url=settings.llm_base_url,
        model=settings.model,
        max_tokens=settings.max_tokens,
    )


def _build_publisher(settings: Settings) -> ThreadPublisher:
    if settings.publish_sink == "x":
        token = settings.access_token
        if not token:
            raise ValueError(f"{settings.access_token_env} is not set")
        sink = XSink(access_token=token, base_url=settings.publish_base_url)
    else:
        sink = ConsoleSink()
    return ThreadPublisher(
        sink,
        max_length=settings.max_message_length,
        gate=IntervalGate(settings.publish_interval_s),
    )
