"""
Gemini REST client with model fallback.

Models are tried in priority order. A failure that looks like quota, a
missing model or an unsupported request field moves on to the next model;
any other failure (a bad API key, a network error) aborts the chat.
"""

import logging
import os
from typing import Callable, Dict, List, Optional, Sequence, Any

import requests

from finsight.advisor.context import (
    SYSTEM_PROMPT,
    PRIMER_REQUEST,
    PRIMER_REPLY,
    build_contents,
    build_financial_context,
    currency_symbol,
)
from finsight.utils.error_utils import AdvisorError

logger = logging.getLogger("finsight.advisor")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"

# (model, API version) in the order they are tried
MODELS = [
    ("gemini-2.0-flash", "v1beta"),
    ("gemini-2.0-flash-lite", "v1beta"),
    ("gemini-1.5-flash", "v1"),
    ("gemini-1.5-flash-8b", "v1"),
    ("gemini-1.5-pro", "v1"),
    ("gemini-1.0-pro", "v1"),
]

GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 1024,
    "topP": 0.9,
}

RETRYABLE_STATUS_CODES = (404, 429)
RETRYABLE_MARKERS = ("quota", "limit", "not found", "unknown name", "not supported", "invalid")

EXHAUSTED_MESSAGE = (
    "All models exhausted. This usually means the free tier isn't available in your region. "
    "Try enabling billing on Google Cloud (you can set a $0 budget)."
)


def request_timeout() -> float:
    return float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30"))


def is_retryable(status_code: Optional[int], message: str) -> bool:
    """Whether a failed call should fall through to the next model."""
    if status_code in RETRYABLE_STATUS_CODES:
        return True
    message = (message or "").lower()
    return any(marker in message for marker in RETRYABLE_MARKERS)


class GenerationResult:
    """
    Tagged outcome of one model call.

    Exactly one of ``text`` (success) or ``reason`` (failure) is set.
    """

    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"

    def __init__(self, kind: str, model: str, text: Optional[str] = None, reason: Optional[str] = None):
        self.kind = kind
        self.model = model
        self.text = text
        self.reason = reason

    @classmethod
    def success(cls, model: str, text: str) -> "GenerationResult":
        return cls(cls.SUCCESS, model, text=text)

    @classmethod
    def retryable(cls, model: str, reason: str) -> "GenerationResult":
        return cls(cls.RETRYABLE, model, reason=reason)

    @classmethod
    def fatal(cls, model: str, reason: str) -> "GenerationResult":
        return cls(cls.FATAL, model, reason=reason)

    @property
    def ok(self) -> bool:
        return self.kind == self.SUCCESS

    def __repr__(self):
        return f"<GenerationResult(kind='{self.kind}', model='{self.model}')>"


class ModelAdapter:
    """A remote text generator."""

    name = "model"

    def generate(self, contents: List[Dict[str, Any]]) -> GenerationResult:
        raise NotImplementedError


class GeminiAdapter(ModelAdapter):
    """
    One Gemini model behind the generateContent REST endpoint.

    v1beta models receive the system prompt as ``system_instruction``; v1
    models get a primer exchange prepended to the conversation instead.
    """

    def __init__(self, model: str, version: str, api_key: str, timeout: Optional[float] = None):
        self.name = model
        self.version = version
        self.api_key = api_key
        self.timeout = request_timeout() if timeout is None else timeout

    @property
    def uses_system_instruction(self) -> bool:
        return self.version == "v1beta"

    @property
    def url(self) -> str:
        return f"{GEMINI_BASE_URL}/{self.version}/models/{self.name}:generateContent"

    def build_body(self, contents: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.uses_system_instruction:
            return {
                "contents": contents,
                "generationConfig": GENERATION_CONFIG,
                "system_instruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            }
        primer = [
            {"role": "user", "parts": [{"text": PRIMER_REQUEST}]},
            {"role": "model", "parts": [{"text": PRIMER_REPLY}]},
        ]
        return {"contents": primer + list(contents), "generationConfig": GENERATION_CONFIG}

    def generate(self, contents: List[Dict[str, Any]]) -> GenerationResult:
        try:
            resp = requests.post(
                self.url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=self.build_body(contents),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return GenerationResult.fatal(self.name, f"Request failed: {e}")

        if resp.status_code != 200:
            message = _error_message(resp)
            if is_retryable(resp.status_code, message):
                return GenerationResult.retryable(self.name, message)
            return GenerationResult.fatal(self.name, message)

        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0].get("text")
        except (ValueError, KeyError, IndexError, TypeError):
            text = None
        if not text:
            return GenerationResult.retryable(self.name, "Empty response")
        return GenerationResult.success(self.name, text)


def _error_message(resp) -> str:
    try:
        message = resp.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or str(resp.status_code)


def gemini_adapters(api_key: str, timeout: Optional[float] = None) -> List[ModelAdapter]:
    """Adapters for every model in MODELS, in priority order."""
    return [GeminiAdapter(model, version, api_key, timeout) for model, version in MODELS]


def generate_with_fallback(adapters: Sequence[ModelAdapter], contents: List[Dict[str, Any]]) -> GenerationResult:
    """
    Try each adapter until one succeeds.

    Returns:
        The first successful GenerationResult

    Raises:
        AdvisorError: On the first fatal failure, or when every adapter failed
    """
    attempts = []
    for adapter in adapters:
        logger.info(f"Trying {adapter.name}...")
        result = adapter.generate(contents)

        if result.ok:
            logger.info(f"Success with {result.model}")
            return result

        attempts.append(f"{adapter.name}: {result.reason}")
        logger.warning(f"{adapter.name} failed: {result.reason}")

        if result.kind == GenerationResult.FATAL:
            raise AdvisorError(result.reason, attempts, fatal=True)

    details = "\n".join(f"• {attempt}" for attempt in attempts)
    raise AdvisorError(f"{EXHAUSTED_MESSAGE}\n\nDetails:\n{details}", attempts)


class AdvisorService:
    """
    Chat front end: builds the context and runs the model fallback.

    Args:
        api_key: Default Gemini key (falls back to GEMINI_API_KEY)
        adapters_factory: Callable building the adapter list from a key
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        adapters_factory: Callable[[str], List[ModelAdapter]] = gemini_adapters,
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.adapters_factory = adapters_factory

    def chat(
        self,
        messages: List[Dict[str, str]],
        snapshot: Dict[str, Any],
        state,
        lang: str = "en",
        currency: str = "USD",
        api_key: Optional[str] = None,
    ) -> str:
        """
        Answer the last message of a transcript.

        Args:
            messages: Transcript as {"role", "content"} dicts, oldest first
            snapshot: Metrics snapshot of the state
            state: AppState with the raw records
            lang: Reply language ("en" or "hi")
            currency: Currency code or symbol for money amounts
            api_key: Per-request key overriding the configured one

        Returns:
            The model's reply text

        Raises:
            AdvisorError: If no key is configured or every model failed
        """
        key = api_key or self.api_key
        if not key:
            raise AdvisorError("Gemini API key not configured. Set GEMINI_API_KEY or send X-Gemini-Key.")

        symbol = currency_symbol(currency)
        context = build_financial_context(snapshot, state, symbol)
        contents = build_contents(messages, context, lang, symbol)
        return generate_with_fallback(self.adapters_factory(key), contents).text
