"""Pytest fixtures shared across the suite: canned reports and fake collaborators."""

from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from crypto_narrator.models.datatypes import HistoricalBar, SentimentSample, TickerSnapshot
from crypto_narrator.providers.base import (
    ChatCompletionProvider,
    HistoryProvider,
    MessageSink,
    SentimentProvider,
    TickerProvider,
)

REALTIME_REPORT = """**Bitcoin (BTCUSDT)**
- Preço Atual: $97234.50
- Variação 24h: 3.21%
- Volume: 1234.57 BTC / $120000000.00 USDT
- Alta: $98000.00
- Baixa: $95000.00
"""

PREDICTION_REPORT = """ANÁLISE PREDITIVA BITCOIN
-------------------------
Alvo: $97k-$100k até 31 de dezembro de 2024
Confiança: Média

FATORES POSITIVOS:
1. Preço acima da média de 30 dias
2. Volume crescente nas últimas sessões
3. Sentimento em ganância sustentada

FATORES DE RISCO:
1. Resistência próxima de $100000
2. Fear & Greed em nível elevado
3. Queda de volume em dias de alta

INDICADORES TÉCNICOS:
- Fear & Greed: 72 (Greed)
- Tendência: alta moderada
- Momentum: positivo

CONCLUSÃO:
O alvo é plausível, mas depende da manutenção do volume.
"""


def make_response(status_code: int = 200, json_data=None, text: str = "", json_error: bool = False) -> MagicMock:
    """Build a ``requests.Response`` stand-in."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        resp.json.return_value = json_data
    return resp


class FakeTickerProvider(TickerProvider):
    def __init__(self, snapshot: TickerSnapshot) -> None:
        self.snapshot = snapshot
        self.calls: List[str] = []

    def fetch_ticker(self, symbol: str) -> TickerSnapshot:
        self.calls.append(symbol)
        return self.snapshot


class FakeHistoryProvider(HistoryProvider):
    def __init__(self, bars: List[HistoricalBar]) -> None:
        self.bars = bars
        self.calls: List[tuple] = []

    def fetch_bars(self, base: str, quote: str, days: int) -> List[HistoricalBar]:
        self.calls.append((base, quote, days))
        return self.bars


class FakeSentimentProvider(SentimentProvider):
    def __init__(self, samples: List[SentimentSample]) -> None:
        self.samples = samples

    def fetch_samples(self, limit: int) -> List[SentimentSample]:
        return self.samples[:limit]


class ScriptedChatProvider(ChatCompletionProvider):
    """Returns canned replies in order and records every request."""

    model = "scripted"

    def __init__(self, replies: List[str]) -> None:
        self.replies = list(replies)
        self.requests: List[Dict] = []

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        history: Optional[List[Dict[str, str]]] = None,
        temperature: float = 0.0,
    ) -> str:
        self.requests.append({
            "system": system_prompt,
            "user": user_prompt,
            "history": list(history or []),
            "temperature": temperature,
        })
        return self.replies.pop(0)


class RecordingSink(MessageSink):
    """Returns ids ``m1``, ``m2``...; optionally fails on a given call number."""

    def __init__(self, fail_on: Optional[int] = None) -> None:
        self.fail_on = fail_on
        self.posts: List[tuple] = []

    def post(self, text: str, reply_to: Optional[str] = None) -> str:
        from crypto_narrator.core.errors import NetworkError

        call_number = len(self.posts) + 1
        self.posts.append((text, reply_to))
        if self.fail_on == call_number:
            raise NetworkError("HTTP 429 from sink", status_code=429)
        return f"m{call_number}"


class FakeClock:
    """Manual clock; ``sleep`` advances it and records the duration."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def raw_snapshot() -> TickerSnapshot:
    return TickerSnapshot(
        symbol="BTCUSDT",
        last_price="97234.50000000",
        high_price="98000.00000000",
        low_price="95000.00000000",
        price_change_percent="3.214",
        volume="1234.56780000",
        quote_volume="120000000.00000000",
    )


@pytest.fixture
def samples() -> List[SentimentSample]:
    return [
        SentimentSample(value=72, classification="Greed", timestamp=1734912000),
        SentimentSample(value=65, classification="Greed", timestamp=1734825600),
        SentimentSample(value=48, classification="Neutral", timestamp=1734739200),
    ]


@pytest.fixture
def bars() -> List[HistoricalBar]:
    start = 1732320000  # 2024-11-23 00:00 UTC
    closes = [90000.0, 91000.0, 92500.0, 91800.0, 93000.0, 94500.0, 95200.0, 96100.0, 97234.5]
    return [
        HistoricalBar(time=start + i * 86400, close=c, volume_from=1000.0 + i, volume_to=c * (1000.0 + i))
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
