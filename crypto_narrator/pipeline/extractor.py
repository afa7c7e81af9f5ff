"""Recover structured fields from the narrator's free text.

Every field has its own pattern anchored to a distinct label of the prompt
template, so patterns are applied independently and the first match wins.
A miss never raises: the field comes back as ``None`` and a warning is
logged, so a reworded report degrades visibly instead of silently.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from crypto_narrator.core.errors import TypeConstraintError
from crypto_narrator.core.logger import logger
from crypto_narrator.models.datatypes import ExtractedAnalysis, ReportedTicker

_NUMBER = r"(-?\d+(?:\.\d+)?)"
# Tolerates markdown bold on either side of the colon ("**Confiança:**", "**Confiança**:")
_AFTER_LABEL = r"\**:[ \t*]*"
_ORDINAL_LINE = re.compile(r"^\s*\d{1,2}[.)]\s*(.*)$")


def _is_heading(line: str) -> bool:
    label, colon, _ = line.strip(" \t*#").partition(":")
    label = label.rstrip("*").strip()
    return bool(colon) and label.isupper()


@dataclass(frozen=True)
class FieldPattern:
    """One labeled capture rule."""
    name: str
    regex: re.Pattern
    group: int = 1

    def search(self, text: str) -> Optional[str]:
        match = self.regex.search(text)
        if not match:
            return None
        value = match.group(self.group)
        return value.strip() if value is not None else None


def labeled(name: str, label: str, value: str = r"([^\n]+)", group: int = 1) -> FieldPattern:
    """Build a :class:`FieldPattern` capturing ``value`` right after ``label:``."""
    return FieldPattern(name, re.compile(re.escape(label) + _AFTER_LABEL + value), group)


def _require_text(text: object) -> str:
    if not isinstance(text, str):
        raise TypeConstraintError(f"Expected report text as str, got {type(text).__name__}")
    return text


def extract_fields(text: str, patterns: Iterable[FieldPattern], source: str = "report") -> Dict[str, Optional[str]]:
    """Apply every pattern to the full text.

    Args:
        text: Narrator output.
        patterns: One rule per target field.
        source: Name used in warning messages.

    Returns:
        Dict[str, Optional[str]]: Field name to captured value, ``None`` on a miss.

    Raises:
        TypeConstraintError: ``text`` is not a string.
    """
    text = _require_text(text)
    result: Dict[str, Optional[str]] = {}
    for pattern in patterns:
        value = pattern.search(text)
        if value is None or value == "":
            logger.warning(f"Extractor: '{pattern.name}' not found in {source}")
            value = None
        result[pattern.name] = value
    return result


def extract_numbered_block(text: str, label: str) -> Optional[List[str]]:
    """Return the numbered items listed under ``label:``.

    The block runs from the label to the next heading (an uppercase label
    followed by a colon, e.g. ``FATORES DE RISCO:``) or the end of the text.
    Only lines starting with an ordinal marker (``1.``, ``2)``...) are kept;
    continuation lines and sub-bullets are skipped. Markers are stripped.

    Returns:
        Optional[List[str]]: ``None`` when the label is absent, otherwise the items (possibly empty).

    Raises:
        TypeConstraintError: ``text`` is not a string.
    """
    text = _require_text(text)
    header = re.search(re.escape(label) + r"\**:?[ \t*]*(?:\n|$)", text)
    if not header:
        return None

    items: List[str] = []
    for line in text[header.end():].splitlines():
        match = _ORDINAL_LINE.match(line)
        if not match:
            if _is_heading(line):
                break
            continue
        item = match.group(1).strip()
        if item:
            items.append(item)
    return items


def ticker_patterns(base_asset: str = "BTC", quote_asset: str = "USDT") -> List[FieldPattern]:
    """Patterns for the real-time report template."""
    base = re.escape(base_asset)
    quote = re.escape(quote_asset)
    return [
        labeled("last_price", "Preço Atual", r"\$[ \t]*" + _NUMBER),
        labeled("price_change_percent", "Variação 24h", r"\+?" + _NUMBER + r"[ \t]*%"),
        labeled("volume", "Volume", _NUMBER + r"[ \t]*" + base),
        FieldPattern("quote_volume", re.compile(r"/[ \t]*\$[ \t]*" + _NUMBER + r"[ \t]*" + quote)),
        labeled("high_price", "Alta", r"\$[ \t]*" + _NUMBER),
        labeled("low_price", "Baixa", r"\$[ \t]*" + _NUMBER),
    ]


PREDICTION_PATTERNS = [
    labeled("confidence", "Confiança"),
    labeled("fear_greed_value", "Fear & Greed", r"([^\n(]+?)[ \t]*\(([^)\n]+)\)", group=1),
    labeled("fear_greed_label", "Fear & Greed", r"([^\n(]+?)[ \t]*\(([^)\n]+)\)", group=2),
    labeled("trend", "Tendência"),
]

SUPPORTING_FACTORS_LABEL = "FATORES POSITIVOS"
KEY_RISKS_LABEL = "FATORES DE RISCO"


def extract_reported_ticker(text: str, base_asset: str = "BTC", quote_asset: str = "USDT") -> ReportedTicker:
    """Recover the ticker values printed in a real-time report.

    Example:
        ``"- Preço Atual: $97234.50"`` gives ``last_price == "97234.50"``.
    """
    values = extract_fields(text, ticker_patterns(base_asset, quote_asset), source="realtime report")
    return ReportedTicker(**values)


def extract_analysis(text: str, current_price: Optional[str] = None) -> ExtractedAnalysis:
    """Recover the predictive analysis fields.

    ``target_range`` and ``target_date`` are left ``None``; the caller fills
    them from its own arguments rather than trusting the model's echo.
    """
    values = extract_fields(text, PREDICTION_PATTERNS, source="prediction report")

    factors = extract_numbered_block(text, SUPPORTING_FACTORS_LABEL)
    risks = extract_numbered_block(text, KEY_RISKS_LABEL)
    for name, block in (("supporting_factors", factors), ("key_risks", risks)):
        if block is None:
            logger.warning(f"Extractor: '{name}' block not found in prediction report")
        elif not block:
            logger.warning(f"Extractor: '{name}' block is present but has no numbered items")

    if current_price is None:
        logger.warning("Extractor: no current price available for the analysis")

    return ExtractedAnalysis(
        current_price=current_price,
        confidence=values["confidence"],
        supporting_factors=factors,
        key_risks=risks,
        fear_greed_value=values["fear_greed_value"],
        fear_greed_label=values["fear_greed_label"],
        trend=values["trend"],
    )
