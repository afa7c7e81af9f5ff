"""Data structures for the crypto narrator pipeline."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TickerSnapshot:
    """
    24h statistics for one trading pair. Numeric fields are decimal strings
    exactly as the exchange delivers them (or as normalized).
    """
    symbol: str
    last_price: str
    high_price: str
    low_price: str
    price_change_percent: str
    volume: str
    quote_volume: str
    fetched_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class SentimentSample:
    """One Fear & Greed reading."""
    value: int  # 0-100
    classification: str
    timestamp: int  # epoch seconds


@dataclass(frozen=True)
class HistoricalBar:
    """One daily bar."""
    time: int  # epoch seconds
    close: float
    volume_from: float
    volume_to: float


@dataclass
class NarrativeReport:
    """Free text returned by the model for one prompt."""
    kind: str  # "realtime" or "prediction"
    text: str
    model: str = ""


@dataclass
class ReportedTicker:
    """
    Ticker values recovered from the real-time report. ``None`` means the
    label was not found in the text.
    """
    last_price: Optional[str] = None
    price_change_percent: Optional[str] = None
    volume: Optional[str] = None
    quote_volume: Optional[str] = None
    high_price: Optional[str] = None
    low_price: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]


@dataclass
class ExtractedAnalysis:
    """
    Structured view of the predictive report.

    Scalars are ``None`` when their label did not match. List fields are
    ``None`` when the labeled block is absent and ``[]`` when the block is
    present but holds no numbered lines.
    """
    target_range: Optional[str] = None
    target_date: Optional[str] = None
    current_price: Optional[str] = None
    confidence: Optional[str] = None
    supporting_factors: Optional[List[str]] = None
    key_risks: Optional[List[str]] = None
    fear_greed_value: Optional[str] = None
    fear_greed_label: Optional[str] = None
    trend: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]


@dataclass
class PublishResult:
    """Outcome of posting one message of a reply chain."""
    index: int
    text: str
    ok: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class PipelineResult:
    """Everything produced by a single pipeline run."""
    snapshot: TickerSnapshot
    normalized: TickerSnapshot
    realtime_report: NarrativeReport
    reported_ticker: ReportedTicker
    sentiment: List[SentimentSample]
    bars: List[HistoricalBar]
    prediction_report: NarrativeReport
    analysis: ExtractedAnalysis
    messages: List[str]
    publish_results: List[PublishResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
