"""
DeepSeek LLM client.

DeepSeek exposes an OpenAI-compatible API, so calls go through the openai
SDK pointed at DEEPSEEK_BASE_URL.

Provides:
- Config loaded from environment variables (frozen dataclass)
- DeepSeekError with a small code vocabulary (rate_limit, server, network, invalid)
- Retry with fixed backoff for retryable codes
- Structured output parsing into Pydantic models
- Embeddings

All DeepSeek calls in the codebase go through this client. Tests patch
_call_provider / _call_embeddings to avoid real HTTP calls.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Sequence, TypeVar

import openai
from pydantic import BaseModel, ValidationError

logger = logging.getLogger("lumora.llm")

# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

ErrorCode = Literal["rate_limit", "server", "network", "invalid"]
Status = Literal["success", "failure"]

RETRYABLE_CODES: frozenset[str] = frozenset({"network", "server", "rate_limit"})

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DeepSeekError(Exception):
    """
    Exception raised when a DeepSeek call fails.

    code drives retry decisions; status is the HTTP status API views
    should answer with. No openai exception types escape this module.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = "server",
        status: int = 500,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.original_error = original_error

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES


class StructuredOutputError(Exception):
    """
    Exception raised when structured output parsing fails.

    Raised when:
    - Raw text is not valid JSON
    - JSON doesn't validate against the target Pydantic model
    """

    pass


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class DeepSeekConfig:
    """
    DeepSeek client configuration.

    Environment Variables:
    - DEEPSEEK_API_KEY: API key (required for real calls)
    - DEEPSEEK_BASE_URL: API root (default: https://api.deepseek.com/v1)
    - DEEPSEEK_CHAT_MODEL: chat model (default: deepseek-chat)
    - DEEPSEEK_EMBEDDING_MODEL: embedding model (default: deepseek-embedding)
    - DEEPSEEK_TIMEOUT_S: per-request timeout in seconds (default: 30)
    - DEEPSEEK_MAX_ATTEMPTS: attempts per call including the first (default: 3)
    """

    api_key: str | None = None
    base_url: str = "https://api.deepseek.com/v1"
    chat_model: str = "deepseek-chat"
    embedding_model: str = "deepseek-embedding"
    timeout_s: float = 30.0
    max_attempts: int = 3
    retry_delays: tuple[float, ...] = (0.6, 1.5, 3.0)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


def load_config_from_env() -> DeepSeekConfig:
    """
    Load DeepSeek configuration from environment variables.

    Returns defaults for anything unset or unparsable, so tests run without
    any configuration (and without an API key).
    """
    api_key = os.getenv("DEEPSEEK_API_KEY") or None

    try:
        timeout_s = float(os.getenv("DEEPSEEK_TIMEOUT_S", "30"))
    except ValueError:
        timeout_s = 30.0

    try:
        max_attempts = max(1, int(os.getenv("DEEPSEEK_MAX_ATTEMPTS", "3")))
    except ValueError:
        max_attempts = 3

    return DeepSeekConfig(
        api_key=api_key,
        base_url=os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1"),
        chat_model=os.getenv("DEEPSEEK_CHAT_MODEL", "deepseek-chat"),
        embedding_model=os.getenv("DEEPSEEK_EMBEDDING_MODEL", "deepseek-embedding"),
        timeout_s=timeout_s,
        max_attempts=max_attempts,
    )


# =============================================================================
# STRUCTURED OUTPUT PARSING
# =============================================================================


def parse_structured_output(raw_text: str, target: type[T]) -> T:
    """
    Parse raw LLM output into a Pydantic model.

    Handles both:
    - Pure JSON
    - JSON fenced by markdown triple-backticks (```json ... ```)

    Raises:
        StructuredOutputError: If JSON is invalid or validation fails
    """
    text = raw_text.strip()

    fence_pattern = r"```(?:json)?\s*([\s\S]*?)\s*```"
    match = re.search(fence_pattern, text)
    if match:
        text = match.group(1).strip()

    try:
        return target.model_validate_json(text)
    except json.JSONDecodeError as e:
        raise StructuredOutputError(
            f"Invalid JSON in LLM output: {e}. Raw text: {raw_text[:200]}..."
        ) from e
    except ValidationError as e:
        error_summary = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise StructuredOutputError(
            f"Schema validation failed: {error_summary}. Raw text: {raw_text[:200]}..."
        ) from e


# =============================================================================
# ERROR MAPPING
# =============================================================================


def to_deepseek_error(exc: Exception) -> DeepSeekError:
    """Map any failure raised during a call onto a DeepSeekError."""
    if isinstance(exc, DeepSeekError):
        return exc

    if isinstance(exc, openai.RateLimitError):
        return DeepSeekError(
            "DeepSeek rate limit reached. Please retry in a few seconds.",
            "rate_limit",
            429,
            original_error=exc,
        )

    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        code: ErrorCode = "server" if status >= 500 else "invalid"
        return DeepSeekError(
            f"DeepSeek API error: {exc.message}",
            code,
            status,
            original_error=exc,
        )

    # APITimeoutError is a subclass of APIConnectionError
    if isinstance(exc, openai.APIConnectionError):
        return DeepSeekError(
            "Unable to reach DeepSeek. Check your network connection or API key.",
            "network",
            original_error=exc,
        )

    if isinstance(exc, StructuredOutputError):
        return DeepSeekError(
            "DeepSeek returned malformed JSON.",
            "server",
            original_error=exc,
        )

    return DeepSeekError(
        "DeepSeek request failed unexpectedly. Please try again.",
        "server",
        original_error=exc,
    )


# =============================================================================
# CLIENT
# =============================================================================


class DeepSeekClient:
    """
    Single DeepSeek client for chat, JSON-mode generation and embeddings.

    Usage:
        client = DeepSeekClient()
        reply = client.chat(messages, flow="brand_chat")
        content = client.generate_json(
            system_prompt="...",
            user_prompt="...",
            target=GeneratedContent,
            flow="generate_content",
        )
    """

    def __init__(
        self,
        config: DeepSeekConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            config: Optional DeepSeekConfig. If None, loads from environment.
            sleep: Delay function used between retries (patched in tests).
        """
        self.config = config or load_config_from_env()
        self._sleep = sleep
        self._sdk: openai.OpenAI | None = None

    @property
    def configured(self) -> bool:
        return self.config.configured

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def chat(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        flow: str = "chat",
        temperature: float = 0.7,
        max_tokens: int = 1200,
    ) -> str:
        """
        Free-text chat completion.

        Returns:
            Stripped reply text (never empty)

        Raises:
            DeepSeekError: After retries are exhausted or on a non-retryable failure
        """

        def attempt() -> str:
            text = self._complete(
                messages=messages,
                flow=flow,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=False,
            ).strip()
            if not text:
                raise DeepSeekError("Empty chat response", "server")
            return text

        return self._with_retries(attempt, flow=flow)

    def generate_json(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        target: type[T],
        flow: str,
        temperature: float = 0.8,
        max_tokens: int = 2000,
    ) -> T:
        """
        JSON-mode completion parsed into target.

        Malformed JSON counts as a server error and is retried.

        Raises:
            DeepSeekError: After retries are exhausted or on a non-retryable failure
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        def attempt() -> T:
            raw = self._complete(
                messages=messages,
                flow=flow,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=True,
            )
            if not raw.strip():
                raise DeepSeekError("DeepSeek response was empty.", "server")
            return parse_structured_output(raw, target)

        return self._with_retries(attempt, flow=flow)

    def embed(self, text: str) -> list[float]:
        """
        Embed a single text. No retries; callers decide on fallbacks.

        Raises:
            DeepSeekError: On any failure or an empty embedding
        """
        self._require_api_key()
        try:
            embedding = self._call_embeddings(text)
        except Exception as exc:
            raise to_deepseek_error(exc) from exc
        if not embedding:
            raise DeepSeekError("DeepSeek returned an empty embedding", "server")
        return embedding

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _with_retries(self, attempt: Callable[[], R], *, flow: str) -> R:
        last_error: DeepSeekError | None = None
        for attempt_number in range(1, self.config.max_attempts + 1):
            try:
                return attempt()
            except Exception as exc:
                last_error = to_deepseek_error(exc)
                if not last_error.retryable or attempt_number >= self.config.max_attempts:
                    raise last_error from exc

                delays = self.config.retry_delays
                delay = delays[attempt_number - 1] if attempt_number - 1 < len(delays) else 2.0
                logger.warning(
                    "DEEPSEEK_RETRY flow=%s attempt=%d code=%s delay_s=%.1f",
                    flow,
                    attempt_number,
                    last_error.code,
                    delay,
                )
                self._sleep(delay)

        raise last_error or DeepSeekError("DeepSeek call failed.", "server")

    def _require_api_key(self) -> None:
        if not self.config.api_key:
            raise DeepSeekError(
                "DeepSeek API key missing. Set DEEPSEEK_API_KEY in your environment.",
                "invalid",
                500,
            )

    def _complete(
        self,
        *,
        messages: Sequence[Mapping[str, str]],
        flow: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> str:
        self._require_api_key()
        start_time = time.perf_counter()
        try:
            result = self._call_provider(
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode,
            )
        except Exception as exc:
            self._log_call(
                flow=flow,
                latency_ms=int((time.perf_counter() - start_time) * 1000),
                tokens_in=0,
                tokens_out=0,
                status="failure",
                error_summary=f"{exc.__class__.__name__}: {str(exc)[:100]}",
            )
            raise

        self._log_call(
            flow=flow,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            tokens_in=result["usage"]["prompt_tokens"],
            tokens_out=result["usage"]["completion_tokens"],
            status="success",
        )
        return result["content"]

    def _sdk_client(self) -> openai.OpenAI:
        if self._sdk is None:
            # Retries are handled by _with_retries
            self._sdk = openai.OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout_s,
                max_retries=0,
            )
        return self._sdk

    def _call_provider(
        self,
        *,
        messages: Sequence[Mapping[str, str]],
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> dict[str, Any]:
        """
        Call the chat completions endpoint.

        Returns:
            Dict with 'content' and 'usage' keys
        """
        request_kwargs: dict[str, Any] = {
            "model": self.config.chat_model,
            "messages": [dict(message) for message in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            request_kwargs["response_format"] = {"type": "json_object"}

        response = self._sdk_client().chat.completions.create(**request_kwargs)

        content = response.choices[0].message.content if response.choices else None
        usage = {
            "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
            "completion_tokens": (
                response.usage.completion_tokens if response.usage else 0
            ),
        }
        return {"content": content or "", "usage": usage}

    def _call_embeddings(self, text: str) -> list[float]:
        response = self._sdk_client().embeddings.create(
            model=self.config.embedding_model,
            input=text,
        )
        if not response.data:
            return []
        return list(response.data[0].embedding)

    def _log_call(
        self,
        *,
        flow: str,
        latency_ms: int,
        tokens_in: int,
        tokens_out: int,
        status: Status,
        error_summary: str | None = None,
    ) -> None:
        log_data = {
            "flow": flow,
            "model": self.config.chat_model,
            "latency_ms": latency_ms,
            "tokens_in": tokens_in,
            "tokens_out": tokens_out,
            "status": status,
        }
        if error_summary:
            log_data["error_summary"] = error_summary

        if status == "failure":
            logger.error("LLM call failed", extra=log_data)
        else:
            logger.info("LLM call completed", extra=log_data)


# =============================================================================
# MODULE-LEVEL CONVENIENCE
# =============================================================================

# Default client instance (lazy-loaded)
_default_client: DeepSeekClient | None = None


def get_default_client() -> DeepSeekClient:
    """
    Get the default DeepSeek client instance.

    Creates the client on first call using environment configuration.
    """
    global _default_client
    if _default_client is None:
        _default_client = DeepSeekClient()
    return _default_client


def reset_default_client() -> None:
    """
    Reset the default client (useful for tests).
    """
    global _default_client
    _default_client = None
