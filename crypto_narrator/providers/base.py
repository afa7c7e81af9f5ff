"""Abstract base classes for data providers, the model service and message sinks."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from crypto_narrator.models.datatypes import HistoricalBar, SentimentSample, TickerSnapshot


class TickerProvider(ABC):
    """Abstract interface for fetching a 24h ticker snapshot."""

    @abstractmethod
    def fetch_ticker(self, symbol: str) -> TickerSnapshot:
        """
        Fetch the current 24h statistics for a trading pair.

        Args:
            symbol (str): Exchange pair symbol, e.g. ``BTCUSDT``.

        Returns:
            TickerSnapshot: Raw, un-normalized snapshot.
        """
        pass


class HistoryProvider(ABC):
    """Abstract interface for fetching trailing daily bars."""

    @abstractmethod
    def fetch_bars(self, base: str, quote: str, days: int) -> List[HistoricalBar]:
        """
        Fetch daily bars covering the trailing ``days`` periods.

        Args:
            base (str): Asset symbol, e.g. ``BTC``.
            quote (str): Quote currency, e.g. ``USD``.
            days (int): Number of trailing periods.

        Returns:
            List[HistoricalBar]: Bars ordered oldest first.
        """
        pass


class SentimentProvider(ABC):
    """Abstract interface for market sentiment readings."""

    @abstractmethod
    def fetch_samples(self, limit: int) -> List[SentimentSample]:
        """
        Fetch the most recent sentiment samples.

        Args:
            limit (int): Maximum number of samples.

        Returns:
            List[SentimentSample]: Samples ordered newest first.
        """
        pass


class ChatCompletionProvider(ABC):
    """Abstract interface for a chat-style text generation service."""

    model: str = ""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        history: Optional[List[Dict[str, str]]] = None,
        temperature: float = 0.0,
    ) -> str:
        """
        Generate one completion.

        Args:
            system_prompt (str): System instruction.
            user_prompt (str): The new user turn.
            history (list): Prior ``{"role", "content"}`` turns, oldest first.
            temperature (float): Sampling temperature.

        Returns:
            str: Unstructured model text.
        """
        pass


class MessageSink(ABC):
    """Abstract interface for a service that publishes short messages."""

    @abstractmethod
    def post(self, text: str, reply_to: Optional[str] = None) -> str:
        """
        Publish one message.

        Args:
            text (str): Message body, already within the sink's length cap.
            reply_to (Optional[str]): Id of the message this one replies to.

        Returns:
            str: Id of the published message.
        """
        pass
