"""Extraction checks. Reports which fields the narrator's text failed to yield.

Checks:
  1. Every ticker field was recovered from the real-time report
  2. Every scalar analysis field was recovered from the prediction report
  3. Supporting factor and risk blocks are present and non-empty
  4. Recovered ticker values match the normalized snapshot

Usage:
    python -m crypto_narrator.pipeline.validator saved_prediction_report.txt
"""

import sys
from typing import List, Optional, Tuple

from crypto_narrator.models.datatypes import ExtractedAnalysis, ReportedTicker, TickerSnapshot
from crypto_narrator.pipeline.extractor import extract_analysis

_ANALYSIS_SCALARS = (
    "current_price", "confidence", "fear_greed_value", "fear_greed_label", "trend",
)


def validate_reported_ticker(
    reported: ReportedTicker,
    normalized: Optional[TickerSnapshot] = None,
) -> Tuple[bool, List[str]]:
    """Check a :class:`ReportedTicker` for misses and, given the snapshot, for altered numbers.

    Returns:
        Tuple of ``(passed: bool, messages: list[str])``.
    """
    messages: List[str] = []
    passed = True

    missing = reported.missing_fields()
    if not missing:
        messages.append("PASS  realtime report: all ticker fields found")
    else:
        messages.append(f"FAIL  realtime report: missing {missing}")
        passed = False

    if normalized is not None:
        altered = [
            name for name in ("last_price", "price_change_percent", "volume",
                              "quote_volume", "high_price", "low_price")
            if getattr(reported, name) is not None
            and getattr(reported, name) != getattr(normalized, name)
        ]
        if not altered:
            messages.append("PASS  realtime report: numbers match the normalized snapshot")
        else:
            detail = ", ".join(
                f"{name}={getattr(reported, name)!r} (expected {getattr(normalized, name)!r})"
                for name in altered
            )
            messages.append(f"FAIL  realtime report: altered numbers {detail}")
            passed = False

    return passed, messages


def validate_analysis(analysis: ExtractedAnalysis) -> Tuple[bool, List[str]]:
    """Run the prediction-report checks.

    Returns:
        Tuple of ``(passed: bool, messages: list[str])``.
    """
    messages: List[str] = []
    passed = True

    missing = [name for name in _ANALYSIS_SCALARS if getattr(analysis, name) is None]
    if not missing:
        messages.append("PASS  prediction report: all scalar fields found")
    else:
        messages.append(f"FAIL  prediction report: missing {missing}")
        passed = False

    for name in ("supporting_factors", "key_risks"):
        block = getattr(analysis, name)
        if block is None:
            messages.append(f"FAIL  {name}: labeled block not found")
            passed = False
        elif not block:
            messages.append(f"FAIL  {name}: block found but empty")
            passed = False
        else:
            messages.append(f"PASS  {name}: {len(block)} item(s)")

    return passed, messages


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python -m crypto_narrator.pipeline.validator <prediction_report.txt>")
        return 1
    path = sys.argv[1]
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        print(f"FAIL  could not read report: {exc}")
        return 1

    # the current price comes from the realtime report, which is not checked here
    analysis = extract_analysis(text, current_price="n/a")

    passed, messages = validate_analysis(analysis)
    for msg in messages:
        print(msg)
    if passed:
        print("\nEXTRACTION PASSED ✓")
        return 0
    print("\nEXTRACTION FAILED ✗")
    return 1


if __name__ == "__main__":
    sys.exit(main())
