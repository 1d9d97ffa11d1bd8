from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol

import httpx
from openai import OpenAI

from shared.common.config import ModelOptions, Settings
from shared.common.records import CompletionOutcome, OutcomeKind, PromptPair


class CompletionBackend(Protocol):
    def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> str | None: ...


def build_openai_client(settings: Settings, *, http_client: httpx.Client | None = None) -> OpenAI:
    if http_client is None:
        http_client = httpx.Client(timeout=httpx.Timeout(settings.openai_timeout_seconds, connect=5.0))
    # Retries are owned by CompletionClient, never by the SDK.
    return OpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
        http_client=http_client,
    )


class OpenAIChatBackend:
    def __init__(self, client: OpenAI) -> None:
        self._client = client

    def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> str | None:
        extra: dict[str, Any] = {}
        if json_mode:
            extra["response_format"] = {"type": "json_object"}
        response = self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **extra,
        )
        if not response.choices:
            return None
        message = response.choices[0].message
        return message.content if message is not None else None


def upstream_status(error: BaseException) -> int | None:
    """Read an HTTP status from either SDK error shape (``status_code``/``status`` or ``response.*``)."""
    for owner in (error, getattr(error, "response", None)):
        if owner is None:
            continue
        for attr in ("status_code", "status"):
            value = getattr(owner, attr, None)
            if isinstance(value, int):
                return value
    return None


def classify_upstream_error(error: BaseException) -> OutcomeKind:
    status = upstream_status(error)
    if status == 429:
        return OutcomeKind.RATE_LIMITED
    if status == 401:
        return OutcomeKind.UNAUTHORIZED
    return OutcomeKind.TRANSIENT_FAILURE


class CompletionClient:
    def __init__(
        self,
        backend: CompletionBackend,
        *,
        max_retries: int = 2,
        base_delay_seconds: float = 0.1,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._backend = backend
        self._max_retries = max_retries
        self._base_delay_seconds = base_delay_seconds
        self._logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

    def backoff_delay(self, retry_number: int) -> float:
        return (2**retry_number) * self._base_delay_seconds

    def _wait(self, delay: float, cancel: threading.Event | None) -> bool:
        """Return True when the wait was interrupted by cancellation."""
        if cancel is not None:
            return cancel.wait(delay)
        self._sleep(delay)
        return False

    def complete(
        self,
        prompts: PromptPair,
        options: ModelOptions,
        *,
        cancel: threading.Event | None = None,
    ) -> CompletionOutcome:
        attempts = 0
        last_cause = "no attempt made"
        while attempts <= self._max_retries:
            if cancel is not None and cancel.is_set():
                return CompletionOutcome.transient_failure("cancelled", attempts=attempts)
            attempts += 1
            try:
                text = self._backend.complete(
                    model=options.model,
                    system_prompt=prompts.system_prompt,
                    user_prompt=prompts.user_prompt,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                    json_mode=options.json_mode,
                )
            except Exception as exc:
                kind = classify_upstream_error(exc)
                if kind is OutcomeKind.RATE_LIMITED:
                    self._logger.warning("Upstream rate limit on attempt %s: %s", attempts, exc)
                    return CompletionOutcome.rate_limited(str(exc), attempts=attempts)
                if kind is OutcomeKind.UNAUTHORIZED:
                    self._logger.error("Upstream rejected credentials on attempt %s: %s", attempts, exc)
                    return CompletionOutcome.unauthorized(str(exc), attempts=attempts)
                last_cause = f"{type(exc).__name__}: {exc}"
                self._logger.warning("Completion attempt %s failed: %s", attempts, last_cause)
                if attempts > self._max_retries:
                    break
                if self._wait(self.backoff_delay(attempts), cancel):
                    return CompletionOutcome.transient_failure("cancelled", attempts=attempts)
                continue

            if text is None or not text.strip():
                return CompletionOutcome.empty(attempts=attempts)
            return CompletionOutcome.success(text, attempts=attempts)

        return CompletionOutcome.transient_failure(last_cause, attempts=attempts)


def build_completion_client(
    settings: Settings,
    *,
    logger: logging.Logger | None = None,
    backend: CompletionBackend | None = None,
) -> CompletionClient | None:
    """Build the process-wide client; None when no credential is configured and no backend is injected."""
    if backend is None:
        if not settings.openai_api_key:
            return None
        backend = OpenAIChatBackend(build_openai_client(settings))
    return CompletionClient(
        backend,
        max_retries=settings.max_retries,
        base_delay_seconds=settings.retry_base_delay_seconds,
        logger=logger,
    )
