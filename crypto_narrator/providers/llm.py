"""OpenAI-compatible chat completion provider and the conversation-aware narrator."""

from typing import Any, Dict, List, Optional

import requests

from crypto_narrator.core.config import DEFAULT_LLM_BASE_URL
from crypto_narrator.core.errors import DecodeError
from crypto_narrator.core.logger import logger
from crypto_narrator.models.datatypes import NarrativeReport
from crypto_narrator.providers.base import ChatCompletionProvider
from crypto_narrator.providers.http import post_json


class OpenAIChatProvider(ChatCompletionProvider):
    """Provider for OpenAI-compatible ``/chat/completions`` APIs (OpenAI, Azure, vLLM...)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_LLM_BASE_URL,
        model: str = "gpt-3.5-turbo",
        max_tokens: Optional[int] = 1000,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            api_key: Bearer key for the API.
            base_url: API root, without the ``/chat/completions`` suffix.
            model: Model identifier.
            max_tokens: Completion cap; ``None`` leaves it to the service.
            session: Optional shared ``requests.Session``.
        """
        if not api_key:
            raise ValueError("OpenAIChatProvider requires an API key")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.session = session

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        history: Optional[List[Dict[str, str]]] = None,
        temperature: float = 0.0,
    ) -> str:
        """Send system instruction, prior turns and the user turn; return the reply text.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            DecodeError: Invalid JSON or a response without ``choices[0].message.content``.
        """
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(history or [])
        messages.append({"role": "user", "content": user_prompt})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if self.max_tokens:
            payload["max_tokens"] = self.max_tokens

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.info(f"OpenAIChatProvider: {self.model} ({len(messages)} messages, t={temperature})")
        response = post_json(f"{self.base_url}/chat/completions", payload, headers=headers, session=self.session)
        return _content_from_response(response)


def _content_from_response(response: Any) -> str:
    if not isinstance(response, dict):
        raise DecodeError(f"Expected dict response, got {type(response).__name__}")

    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        raise DecodeError("Missing or empty 'choices' in completion response")

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise DecodeError("Missing 'message' in first choice")

    content = message.get("content")
    if not isinstance(content, str):
        raise DecodeError(f"Expected string content, got {type(content).__name__}")
    return content


class ConversationMemory:
    """Ordered buffer of prior user/assistant turns shared across prompts."""

    def __init__(self) -> None:
        self.turns: List[Dict[str, str]] = []

    def add_exchange(self, user: str, assistant: str) -> None:
        self.turns.append({"role": "user", "content": user})
        self.turns.append({"role": "assistant", "content": assistant})

    def as_messages(self) -> List[Dict[str, str]]:
        return list(self.turns)

    def clear(self) -> None:
        self.turns.clear()

    def __len__(self) -> int:
        return len(self.turns)


class Narrator:
    """Turns prompts into :class:`NarrativeReport` objects, remembering every exchange.

    Args:
        provider: The completion service.
        memory: Shared history; a fresh one is created when omitted.
    """

    def __init__(self, provider: ChatCompletionProvider, memory: Optional[ConversationMemory] = None) -> None:
        self.provider = provider
        self.memory = memory if memory is not None else ConversationMemory()

    def narrate(self, kind: str, system_prompt: str, user_prompt: str, temperature: float = 0.0) -> NarrativeReport:
        text = self.provider.complete(
            system_prompt,
            user_prompt,
            history=self.memory.as_messages(),
            temperature=temperature,
        )
        self.memory.add_exchange(user_prompt, text)
        logger.info(f"Narrator: {kind} report received ({len(text)} chars)")
        logger.debug(f"Narrator: {kind} report text:\n{text}")
        return NarrativeReport(kind=kind, text=text, model=getattr(self.provider, "model", ""))
