"""Tests for two-decimal ticker normalization."""

import pytest

from crypto_narrator.core.errors import ParseError
from crypto_narrator.pipeline.normalizer import (
    TICKER_NUMERIC_FIELDS,
    normalize_decimal,
    normalize_fields,
    normalize_ticker,
    snapshot_to_payload,
)

RAW_TICKER = {
    "lastPrice": "97000.1",
    "priceChangePercent": "2.5",
    "volume": "1234.5678",
    "quoteVolume": "120000000",
    "highPrice": "98000",
    "lowPrice": "95000",
}


class TestNormalizeDecimal:
    """Tests for normalize_decimal."""

    @pytest.mark.parametrize("raw,expected", [
        ("97000.1", "97000.10"),
        ("1234.5678", "1234.57"),
        ("120000000", "120000000.00"),
        ("-1.234", "-1.23"),
        ("0.00000001", "0.00"),
        ("  42.5 ", "42.50"),
        (3.14159, "3.14"),
        (7, "7.00"),
    ])
    def test_two_decimal_places(self, raw, expected):
        """Test that every value comes out with exactly two decimals."""
        assert normalize_decimal(raw) == expected

    def test_rounds_half_up(self):
        """Test that ties round away from zero, not to even."""
        assert normalize_decimal("2.345") == "2.35"
        assert normalize_decimal("2.355") == "2.36"
        assert normalize_decimal("-0.125") == "-0.13"

    @pytest.mark.parametrize("raw", ["abc", "", "1,234.50", "NaN", "Infinity", None, True])
    def test_non_numeric_raises_parse_error(self, raw):
        """Test that malformed input is rejected."""
        with pytest.raises(ParseError):
            normalize_decimal(raw)

    @pytest.mark.parametrize("raw,expected", [
        ("123456789012345678901234567.5", "123456789012345678901234567.50"),
        ("1" * 40 + ".125", "1" * 40 + ".13"),
        ("9" * 27 + ".995", "1" + "0" * 27 + ".00"),
    ])
    def test_long_numbers(self, raw, expected):
        """Test that valid numbers wider than the default decimal precision are rendered."""
        assert normalize_decimal(raw) == expected

    def test_parse_error_is_value_error(self):
        """Test that callers catching ValueError also catch ParseError."""
        with pytest.raises(ValueError):
            normalize_decimal("not-a-number")


class TestNormalizeFields:
    """Tests for normalize_fields on raw ticker payloads."""

    def test_worked_example(self):
        """Test the documented end-to-end normalization example."""
        assert normalize_fields(RAW_TICKER) == {
            "lastPrice": "97000.10",
            "priceChangePercent": "2.50",
            "volume": "1234.57",
            "quoteVolume": "120000000.00",
            "highPrice": "98000.00",
            "lowPrice": "95000.00",
        }

    def test_key_set_unchanged(self):
        """Test that non-numeric keys pass through and no key is added or dropped."""
        payload = dict(RAW_TICKER, symbol="BTCUSDT", count=12345)
        result = normalize_fields(payload)
        assert set(result) == set(payload)
        assert result["symbol"] == "BTCUSDT"
        assert result["count"] == 12345

    def test_every_numeric_field_has_two_decimals(self):
        """Test the two-digit fraction on every numeric field."""
        result = normalize_fields(RAW_TICKER)
        for name in TICKER_NUMERIC_FIELDS:
            integer, _, fraction = result[name].partition(".")
            assert len(fraction) == 2, name
            assert integer.lstrip("-").isdigit(), name

    def test_idempotent(self):
        """Test that normalizing normalized data changes nothing."""
        once = normalize_fields(RAW_TICKER)
        assert normalize_fields(once) == once

    def test_input_not_mutated(self):
        """Test that the original payload is left untouched."""
        payload = dict(RAW_TICKER)
        normalize_fields(payload)
        assert payload == RAW_TICKER

    def test_bad_field_raises(self):
        """Test that one malformed field fails the whole call."""
        with pytest.raises(ParseError):
            normalize_fields(dict(RAW_TICKER, volume="n/a"))


class TestNormalizeTicker:
    """Tests for normalize_ticker on snapshots."""

    def test_snapshot_copy(self, raw_snapshot):
        """Test that a normalized copy is returned and the original kept."""
        result = normalize_ticker(raw_snapshot)
        assert result is not raw_snapshot
        assert result.last_price == "97234.50"
        assert result.price_change_percent == "3.21"
        assert result.volume == "1234.57"
        assert result.quote_volume == "120000000.00"
        assert result.symbol == raw_snapshot.symbol
        assert result.fetched_at == raw_snapshot.fetched_at
        assert raw_snapshot.last_price == "97234.50000000"

    def test_snapshot_idempotent(self, raw_snapshot):
        """Test idempotence on snapshots."""
        once = normalize_ticker(raw_snapshot)
        assert normalize_ticker(once) == once

    def test_payload_uses_exchange_keys(self, raw_snapshot):
        """Test that prompt payloads use the exchange's key names."""
        payload = snapshot_to_payload(normalize_ticker(raw_snapshot))
        assert payload["lastPrice"] == "97234.50"
        assert set(payload) == {"symbol", *TICKER_NUMERIC_FIELDS}
