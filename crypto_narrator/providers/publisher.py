"""Message sinks and the paced reply-chain publisher.

ThreadPublisher posts an ordered sequence where each message replies to the
previous one. Consecutive posts are spaced by an :class:`IntervalGate`.
"""

import itertools
from typing import List, Optional, Sequence

import requests

from crypto_narrator.core.config import DEFAULT_X_BASE_URL
from crypto_narrator.core.errors import DecodeError, PipelineError
from crypto_narrator.core.logger import logger
from crypto_narrator.core.pacing import IntervalGate
from crypto_narrator.models.datatypes import PublishResult
from crypto_narrator.providers.base import MessageSink
from crypto_narrator.providers.http import post_json


class ConsoleSink(MessageSink):
    """Prints messages instead of publishing them. Ids are ``console-1``, ``console-2``..."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.posted: List[tuple] = []

    def post(self, text: str, reply_to: Optional[str] = None) -> str:
        message_id = f"console-{next(self._ids)}"
        self.posted.append((message_id, text, reply_to))
        prefix = f"(reply to {reply_to}) " if reply_to else ""
        print(f"{prefix}{text}\n")
        return message_id


class XSink(MessageSink):
    """X (Twitter) API v2 ``POST /tweets`` with an OAuth 2.0 user access token."""

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_X_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not access_token:
            raise ValueError("XSink requires a user access token")
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.session = session

    def post(self, text: str, reply_to: Optional[str] = None) -> str:
        """
        Raises:
            NetworkError: Transport failure or non-2xx status.
            DecodeError: Response without ``data.id``.
        """
        payload: dict = {"text": text}
        if reply_to:
            payload["reply"] = {"in_reply_to_tweet_id": reply_to}
        headers = {"Authorization": f"Bearer {self.access_token}"}
        body = post_json(f"{self.base_url}/tweets", payload, headers=headers, session=self.session)
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("id"):
            raise DecodeError("Publish response missing 'data.id'")
        return str(data["id"])


class ThreadPublisher:
    """Publishes an ordered message sequence as a reply chain.

    Args:
        sink: Where messages go.
        max_length: Character cap per message.
        gate: Pacing gate; defaults to a 2 second interval.
    """

    def __init__(self, sink: MessageSink, max_length: int = 280, gate: Optional[IntervalGate] = None) -> None:
        self.sink = sink
        self.max_length = max_length
        self.gate = gate if gate is not None else IntervalGate(2.0)

    def publish_sequence(self, messages: Sequence[str]) -> List[PublishResult]:
        """Post every message in order, threading each as a reply to the previous.

        A failed post stops the chain; later messages are reported as skipped.

        Returns:
            List[PublishResult]: One result per input message, in input order.

        Raises:
            ValueError: A message exceeds ``max_length``; nothing is posted.
        """
        too_long = [i for i, msg in enumerate(messages) if len(msg) > self.max_length]
        if too_long:
            raise ValueError(
                f"Messages at positions {too_long} exceed {self.max_length} characters"
            )

        results: List[PublishResult] = []
        reply_to: Optional[str] = None
        failed = False
        for index, text in enumerate(messages):
            if failed:
                results.append(PublishResult(index, text, ok=False, error="skipped: previous message failed"))
                continue
            self.gate.wait()
            try:
                message_id = self.sink.post(text, reply_to=reply_to)
            except PipelineError as exc:
                logger.error(f"ThreadPublisher: message {index + 1}/{len(messages)} failed: {exc}")
                results.append(PublishResult(index, text, ok=False, error=str(exc)))
                failed = True
                continue
            logger.info(f"ThreadPublisher: posted {index + 1}/{len(messages)} id={message_id}")
            results.append(PublishResult(index, text, ok=True, message_id=message_id))
            reply_to = message_id

        if not failed:
            logger.info(f"ThreadPublisher: chain of {len(messages)} published")
        return results
