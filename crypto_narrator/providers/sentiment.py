"""Fear & Greed Index readings from alternative.me.

Payload shape::

    {"data": [{"value": "72", "value_classification": "Greed",
               "timestamp": "1734912000"}, ...]}

Samples arrive newest first and are kept in that order.
"""

from typing import Any, List, Optional

import requests

from crypto_narrator.core.config import DEFAULT_SENTIMENT_URL
from crypto_narrator.core.errors import DecodeError, ParseError
from crypto_narrator.core.logger import logger
from crypto_narrator.models.datatypes import SentimentSample
from crypto_narrator.providers.base import SentimentProvider
from crypto_narrator.providers.http import fetch_json


class FearGreedProvider(SentimentProvider):
    """alternative.me ``/fng/`` implementation."""

    def __init__(self, url: str = DEFAULT_SENTIMENT_URL, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.session = session

    def fetch_samples(self, limit: int) -> List[SentimentSample]:
        """
        Fetch up to ``limit`` recent readings.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            DecodeError: Invalid JSON or missing ``data`` list.
            ParseError: A reading's value or timestamp is not an integer, or the value is outside 0-100.
        """
        logger.info(f"Fetching {limit} Fear & Greed samples")
        payload = fetch_json(self.url, params={"limit": limit}, session=self.session)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise DecodeError("Fear & Greed payload has no 'data' list")

        samples = [_sample_from_row(row) for row in payload["data"][:limit]]
        if samples:
            latest = samples[0]
            logger.info(f"Fear & Greed latest: {latest.value} ({latest.classification})")
        else:
            logger.warning("Fear & Greed returned no samples")
        return samples


def _sample_from_row(row: Any) -> SentimentSample:
    if not isinstance(row, dict):
        raise DecodeError(f"Expected sample object, got {type(row).__name__}")
    try:
        value = int(str(row["value"]).strip())
        timestamp = int(str(row.get("timestamp", 0)).strip())
    except KeyError as exc:
        raise DecodeError(f"Sample missing key {exc}") from exc
    except ValueError as exc:
        raise ParseError(f"Non-integer sentiment value in {row}: {exc}") from exc
    if not 0 <= value <= 100:
        raise ParseError(f"Sentiment value {value} outside 0-100 in {row}")
    return SentimentSample(
        value=value,
        classification=str(row.get("value_classification", "")),
        timestamp=timestamp,
    )
