"""Configuration module for loading project settings and environment variables.

``config.yaml`` holds everything that is not a secret. Credentials are read
from the environment (``.env`` is loaded here) under the variable names the
YAML points at, so the file can be committed as-is.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_TICKER_URL = "https://api.binance.com/api/v3/ticker/24hr"
DEFAULT_SENTIMENT_URL = "https://api.alternative.me/fng/"
DEFAULT_HISTORY_URL = "https://min-api.cryptocompare.com/data/v2/histoday"
DEFAULT_LLM_BASE_URL = "https://api.openai.com/v1"
DEFAULT_X_BASE_URL = "https://api.twitter.com/2"


def load_config(config_path: str | Path = "config.yaml") -> Dict[str, Any]:
    """
    Load configuration from the specified YAML file.

    Args:
        config_path (str | Path): Path to the configuration file. Defaults to "config.yaml".

    Returns:
        Dict[str, Any]: A dictionary containing the configuration settings.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_file, "r", encoding="utf-8") as file:
        config_data = yaml.safe_load(file)

    if not config_data:
        raise ValueError(f"Configuration file {config_path} is empty or invalid.")

    return config_data


@dataclass(frozen=True)
class Settings:
    """Typed view over ``config.yaml``.

    Attributes:
        base_asset: Asset being analyzed (``"BTC"``).
        quote_asset: Quote side of the exchange pair (``"USDT"``).
        asset_name: Display name used in prompts and messages (``"Bitcoin"``).
        history_quote: Quote currency for the historical bars (``"USD"``).
        history_days: Trailing daily bars requested.
        sentiment_limit: Fear & Greed samples requested.
        ticker_url / sentiment_url / history_url: Endpoint URLs.
        llm_base_url: OpenAI-compatible API root.
        model: Model identifier.
        realtime_temperature / prediction_temperature: Sampling temperature per report.
        max_tokens: Completion cap per report.
        api_key_env: Environment variable holding the model API key.
        publish_enabled: Post the reply chain instead of only printing it.
        publish_sink: ``"console"`` or ``"x"``.
        publish_base_url: Publishing API root.
        access_token_env: Environment variable holding the publishing token.
        publish_interval_s: Minimum seconds between consecutive posts.
        max_message_length: Character cap per published message.
        log_level: Level name for the shared logger.
    """

    base_asset: str = "BTC"
    quote_asset: str = "USDT"
    asset_name: str = "Bitcoin"
    history_quote: str = "USD"
    history_days: int = 30
    sentiment_limit: int = 30
    ticker_url: str = DEFAULT_TICKER_URL
    sentiment_url: str = DEFAULT_SENTIMENT_URL
    history_url: str = DEFAULT_HISTORY_URL
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    model: str = "gpt-3.5-turbo"
    realtime_temperature: float = 0.0
    prediction_temperature: float = 0.7
    max_tokens: int = 1000
    api_key_env: str = "OPENAI_API_KEY"
    publish_enabled: bool = False
    publish_sink: str = "console"
    publish_base_url: str = DEFAULT_X_BASE_URL
    access_token_env: str = "X_ACCESS_TOKEN"
    publish_interval_s: float = 2.0
    max_message_length: int = 280
    log_level: str = "INFO"

    @property
    def symbol(self) -> str:
        """Exchange pair symbol, e.g. ``BTCUSDT``."""
        return f"{self.base_asset}{self.quote_asset}".upper()

    @property
    def api_key(self) -> Optional[str]:
        return os.getenv(self.api_key_env) or None

    @property
    def access_token(self) -> Optional[str]:
        return os.getenv(self.access_token_env) or None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "Settings":
        """Build settings from the nested dict returned by :func:`load_config`.

        Unknown keys are ignored; missing keys fall back to the defaults above.

        Raises:
            ValueError: If a numeric setting is out of range or the sink is unknown.
        """
        asset = config.get("asset", {}) or {}
        history = config.get("history", {}) or {}
        sentiment = config.get("sentiment", {}) or {}
        endpoints = config.get("endpoints", {}) or {}
        llm = config.get("llm", {}) or {}
        publisher = config.get("publisher", {}) or {}
        logging_cfg = config.get("logging", {}) or {}

        settings = cls(
            base_asset=str(asset.get("base", cls.base_asset)).upper(),
            quote_asset=str(asset.get("quote", cls.quote_asset)).upper(),
            asset_name=asset.get("name", cls.asset_name),
            history_quote=str(history.get("quote", cls.history_quote)).upper(),
            history_days=int(history.get("days", cls.history_days)),
            sentiment_limit=int(sentiment.get("limit", cls.sentiment_limit)),
            ticker_url=endpoints.get("ticker", cls.ticker_url),
            sentiment_url=endpoints.get("sentiment", cls.sentiment_url),
            history_url=endpoints.get("history", cls.history_url),
            llm_base_url=llm.get("base_url", cls.llm_base_url),
            model=llm.get("model", cls.model),
            realtime_temperature=float(llm.get("realtime_temperature", cls.realtime_temperature)),
            prediction_temperature=float(llm.get("prediction_temperature", cls.prediction_temperature)),
            max_tokens=int(llm.get("max_tokens", cls.max_tokens)),
            api_key_env=llm.get("api_key_env", cls.api_key_env),
            publish_enabled=bool(publisher.get("enabled", cls.publish_enabled)),
            publish_sink=str(publisher.get("sink", cls.publish_sink)).lower(),
            publish_base_url=publisher.get("base_url", cls.publish_base_url),
            access_token_env=publisher.get("access_token_env", cls.access_token_env),
            publish_interval_s=float(publisher.get("interval_seconds", cls.publish_interval_s)),
            max_message_length=int(publisher.get("max_length", cls.max_message_length)),
            log_level=str(logging_cfg.get("level", cls.log_level)),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.history_days < 1:
            raise ValueError(f"history.days must be >= 1, got {self.history_days}")
        if self.sentiment_limit < 1:
            raise ValueError(f"sentiment.limit must be >= 1, got {self.sentiment_limit}")
        if self.publish_interval_s < 0:
            raise ValueError(f"publisher.interval_seconds must be >= 0, got {self.publish_interval_s}")
        if self.max_message_length < 1:
            raise ValueError(f"publisher.max_length must be >= 1, got {self.max_message_length}")
        if self.publish_sink not in ("console", "x"):
            raise ValueError(f"publisher.sink must be 'console' or 'x', got {self.publish_sink!r}")
