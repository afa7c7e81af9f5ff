"""Tests for pacing, message sinks and the reply-chain publisher."""

from unittest.mock import patch

import pytest

from crypto_narrator.core.errors import DecodeError, NetworkError
from crypto_narrator.core.pacing import IntervalGate
from crypto_narrator.providers.publisher import ConsoleSink, ThreadPublisher, XSink
from conftest import RecordingSink, make_response


class TestIntervalGate:
    """Tests for IntervalGate."""

    def test_first_pass_never_sleeps(self, fake_clock):
        gate = IntervalGate(2.0, clock=fake_clock, sleep=fake_clock.sleep)
        assert gate.wait() == 0.0
        assert fake_clock.sleeps == []

    def test_sleeps_remaining_interval(self, fake_clock):
        """Test that only the unelapsed part of the interval is slept."""
        gate = IntervalGate(2.0, clock=fake_clock, sleep=fake_clock.sleep)
        gate.wait()
        fake_clock.advance(0.5)
        assert gate.wait() == pytest.approx(1.5)
        assert fake_clock.sleeps == [pytest.approx(1.5)]

    def test_no_sleep_when_interval_elapsed(self, fake_clock):
        gate = IntervalGate(2.0, clock=fake_clock, sleep=fake_clock.sleep)
        gate.wait()
        fake_clock.advance(3.0)
        assert gate.wait() == 0.0

    def test_reset(self, fake_clock):
        gate = IntervalGate(2.0, clock=fake_clock, sleep=fake_clock.sleep)
        gate.wait()
        gate.reset()
        assert gate.wait() == 0.0

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            IntervalGate(-1.0)


class TestThreadPublisher:
    """Tests for ThreadPublisher.publish_sequence."""

    def _publisher(self, sink, clock, interval=2.0, max_length=280):
        gate = IntervalGate(interval, clock=clock, sleep=clock.sleep)
        return ThreadPublisher(sink, max_length=max_length, gate=gate)

    def test_four_messages_threaded_in_order(self, fake_clock):
        """Test ids, reply threading and pacing for a four-message chain."""
        sink = RecordingSink()
        messages = ["um", "dois", "três", "quatro"]

        results = self._publisher(sink, fake_clock).publish_sequence(messages)

        assert [r.ok for r in results] == [True] * 4
        assert [r.message_id for r in results] == ["m1", "m2", "m3", "m4"]
        assert [r.text for r in results] == messages
        assert sink.posts == [("um", None), ("dois", "m1"), ("três", "m2"), ("quatro", "m3")]
        # no wait before the first post, a full interval before each of the others
        assert fake_clock.sleeps == [pytest.approx(2.0)] * 3

    def test_failure_stops_chain(self, fake_clock):
        """Test that a failed post marks the rest as skipped without posting them."""
        sink = RecordingSink(fail_on=2)
        results = self._publisher(sink, fake_clock).publish_sequence(["a", "b", "c"])

        assert [r.ok for r in results] == [True, False, False]
        assert "429" in results[1].error
        assert results[2].error.startswith("skipped")
        assert len(sink.posts) == 2

    def test_over_length_rejected_before_posting(self, fake_clock):
        """Test that a message over the cap aborts before anything is sent."""
        sink = RecordingSink()
        with pytest.raises(ValueError, match=r"\[1\]"):
            self._publisher(sink, fake_clock, max_length=5).publish_sequence(["ok", "too long"])
        assert sink.posts == []

    def test_empty_sequence(self, fake_clock):
        assert self._publisher(RecordingSink(), fake_clock).publish_sequence([]) == []


class TestSinks:
    """Tests for ConsoleSink and XSink."""

    def test_console_sink_prints_and_numbers(self, capsys):
        sink = ConsoleSink()
        first = sink.post("olá")
        second = sink.post("de novo", reply_to=first)
        out = capsys.readouterr().out
        assert (first, second) == ("console-1", "console-2")
        assert "olá" in out
        assert "(reply to console-1) de novo" in out

    def test_x_sink_reply_payload(self):
        """Test that replies carry the parent id."""
        sink = XSink(access_token="tok", base_url="https://x.test/2")
        body = {"data": {"id": "1870000000000000001", "text": "b"}}
        with patch("requests.post", return_value=make_response(201, body)) as mock_post:
            message_id = sink.post("b", reply_to="1869999999999999999")

        assert message_id == "1870000000000000001"
        args, kwargs = mock_post.call_args
        assert args[0] == "https://x.test/2/tweets"
        assert kwargs["json"] == {"text": "b", "reply": {"in_reply_to_tweet_id": "1869999999999999999"}}
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_x_sink_first_message_has_no_reply(self):
        sink = XSink(access_token="tok")
        with patch("requests.post", return_value=make_response(201, {"data": {"id": "1"}})) as mock_post:
            sink.post("a")
        assert mock_post.call_args.kwargs["json"] == {"text": "a"}

    def test_x_sink_errors(self):
        sink = XSink(access_token="tok")
        with patch("requests.post", return_value=make_response(403, text="forbidden")):
            with pytest.raises(NetworkError):
                sink.post("a")
        with patch("requests.post", return_value=make_response(201, {"errors": []})):
            with pytest.raises(DecodeError):
                sink.post("a")

    def test_x_sink_requires_token(self):
        with pytest.raises(ValueError):
            XSink(access_token="")
