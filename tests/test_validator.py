"""Tests for the extraction checks and their command-line entry."""

import sys

from crypto_narrator.models.datatypes import ExtractedAnalysis, ReportedTicker
from crypto_narrator.pipeline import validator
from crypto_narrator.pipeline.extractor import extract_analysis, extract_reported_ticker
from crypto_narrator.pipeline.normalizer import normalize_ticker
from conftest import PREDICTION_REPORT, REALTIME_REPORT


class TestValidateReportedTicker:
    """Tests for validate_reported_ticker."""

    def test_complete_and_matching(self, raw_snapshot):
        reported = extract_reported_ticker(REALTIME_REPORT)
        passed, messages = validator.validate_reported_ticker(reported, normalize_ticker(raw_snapshot))
        assert passed, messages
        assert all(m.startswith("PASS") for m in messages)

    def test_missing_fields_fail(self):
        passed, messages = validator.validate_reported_ticker(ReportedTicker(last_price="1.00"))
        assert not passed
        assert messages[0].startswith("FAIL")
        assert "low_price" in messages[0]

    def test_altered_number_fails(self, raw_snapshot):
        """Test that a model rewriting a number is caught."""
        reported = extract_reported_ticker(REALTIME_REPORT.replace("$97234.50", "$97234.5"))
        passed, messages = validator.validate_reported_ticker(reported, normalize_ticker(raw_snapshot))
        assert not passed
        assert "last_price='97234.5'" in messages[-1]


class TestValidateAnalysis:
    """Tests for validate_analysis."""

    def test_template_report_passes(self):
        passed, messages = validator.validate_analysis(extract_analysis(PREDICTION_REPORT, "97234.50"))
        assert passed, messages

    def test_absent_vs_empty_block(self):
        """Test that the messages distinguish a missing block from an empty one."""
        analysis = ExtractedAnalysis(
            current_price="1", confidence="Alta", fear_greed_value="50",
            fear_greed_label="Neutral", trend="lateral",
            supporting_factors=None, key_risks=[],
        )
        passed, messages = validator.validate_analysis(analysis)
        assert not passed
        assert "FAIL  supporting_factors: labeled block not found" in messages
        assert "FAIL  key_risks: block found but empty" in messages


class TestMain:
    """Tests for the validator command line."""

    def test_passing_report(self, tmp_path, monkeypatch, capsys):
        report = tmp_path / "report.txt"
        report.write_text(PREDICTION_REPORT, encoding="utf-8")
        monkeypatch.setattr(sys, "argv", ["validator", str(report)])
        assert validator.main() == 0
        assert "EXTRACTION PASSED" in capsys.readouterr().out

    def test_drifted_report(self, tmp_path, monkeypatch, capsys):
        report = tmp_path / "report.txt"
        report.write_text(PREDICTION_REPORT.replace("FATORES DE RISCO:", "RISCOS:"), encoding="utf-8")
        monkeypatch.setattr(sys, "argv", ["validator", str(report)])
        assert validator.main() == 1
        assert "FAIL  key_risks" in capsys.readouterr().out

    def test_usage(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["validator"])
        assert validator.main() == 1

    def test_unreadable_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["validator", str(tmp_path / "missing.txt")])
        assert validator.main() == 1
