from __future__ import annotations

import logging
import re
import threading
from typing import Any

from shared.common.completion import CompletionClient
from shared.common.config import Settings
from shared.common.errors import (
    ApiError,
    AuthError,
    ConfigurationError,
    EmptyModelOutput,
    MalformedModelJson,
    RateLimitedError,
    TransientUpstreamError,
    ValidationError,
)
from shared.common.normalizer import ModelOutputError, normalize, validate_acronym_payload
from shared.common.prompts import build_prompts
from shared.common.records import ACRONYM_MAX_LENGTH, CompletionOutcome, EndpointKind, EndpointRequest, OutcomeKind


DEFAULT_IDENTIFIER = "default"

_ACRONYM_CHARSET_RE = re.compile(r"[A-Za-z0-9 ]+")


def parse_fields(raw: str | None) -> tuple[str, ...] | None:
    if not raw:
        return None
    fields: list[str] = []
    for item in raw.split(","):
        name = item.strip()
        if name and name not in fields:
            fields.append(name)
    return tuple(fields) or None


def resolve_request(path: str, fields: str | None = None) -> EndpointRequest:
    segments = [segment for segment in path.split("/") if segment]
    if segments and segments[0] == "acronyms":
        return EndpointRequest(EndpointKind.ACRONYM, "/".join(segments[1:]))
    if segments and segments[0] == "quickstart":
        prompt = segments[1] if len(segments) > 1 else ""
        return EndpointRequest(EndpointKind.QUICKSTART, prompt)
    identifier = path.strip("/") or DEFAULT_IDENTIFIER
    return EndpointRequest(EndpointKind.GENERIC, identifier, parse_fields(fields))


def validate_acronym_name(name: str) -> None:
    if not name:
        raise ValidationError("Name parameter is required", endpoint=name)
    if len(name) > ACRONYM_MAX_LENGTH:
        raise ValidationError(
            f"Name is too long. Maximum length is {ACRONYM_MAX_LENGTH} characters",
            endpoint=name,
        )
    if not _ACRONYM_CHARSET_RE.fullmatch(name):
        raise ValidationError("Name can only contain letters, numbers, and spaces", endpoint=name)


class RequestDispatcher:
    def __init__(self, settings: Settings, client: CompletionClient | None, logger: logging.Logger) -> None:
        self.settings = settings
        self.client = client
        self.logger = logger

    def handle(self, path: str, fields: str | None = None, *, cancel: threading.Event | None = None) -> dict[str, Any]:
        request = resolve_request(path, fields)
        try:
            return self.dispatch(request, cancel=cancel)
        except ApiError:
            raise
        except Exception as exc:
            self.logger.exception("Unexpected error while handling %s", request.identifier)
            raise ApiError(endpoint=request.identifier, details=str(exc)) from exc

    def dispatch(self, request: EndpointRequest, *, cancel: threading.Event | None = None) -> dict[str, Any]:
        if request.kind is EndpointKind.ACRONYM:
            return self._acronyms(request, cancel)
        if request.kind is EndpointKind.QUICKSTART:
            return self._quickstart(request, cancel)
        return self._generic(request, cancel)

    def _require_client(self, identifier: str) -> CompletionClient:
        if self.client is None:
            self.logger.error("OPENAI_API_KEY is not set; refusing request for %s", identifier)
            raise ConfigurationError(endpoint=identifier)
        return self.client

    def _complete(self, request: EndpointRequest, cancel: threading.Event | None) -> CompletionOutcome:
        client = self._require_client(request.identifier)
        options = {
            EndpointKind.GENERIC: self.settings.generic_options,
            EndpointKind.ACRONYM: self.settings.acronym_options,
            EndpointKind.QUICKSTART: self.settings.quickstart_options,
        }[request.kind]
        prompts = build_prompts(
            request.kind,
            request.identifier,
            request.fields,
            api_host=self.settings.api_host,
            owner=self.settings.assistant_owner,
        )
        outcome = client.complete(prompts, options, cancel=cancel)
        if outcome.kind is OutcomeKind.RATE_LIMITED:
            raise RateLimitedError(endpoint=request.identifier, details=outcome.cause)
        if outcome.kind is OutcomeKind.UNAUTHORIZED:
            raise AuthError(endpoint=request.identifier)
        return outcome

    def _generic(self, request: EndpointRequest, cancel: threading.Event | None) -> dict[str, Any]:
        self.logger.info("Processing endpoint: %s", request.identifier)
        if request.fields:
            self.logger.info("Requested fields: %s", ", ".join(request.fields))
        outcome = self._complete(request, cancel)
        if outcome.ok:
            self.logger.info("Model raw response for %s: %s", request.identifier, outcome.text)
        result = normalize(outcome, request.identifier, request.fields)
        if result.is_fallback:
            self.logger.warning(
                "Serving fallback for %s (%s): %s",
                request.identifier,
                result.fallback_reason,
                outcome.cause or outcome.text,
            )
        return result.value

    def _acronyms(self, request: EndpointRequest, cancel: threading.Event | None) -> dict[str, Any]:
        validate_acronym_name(request.identifier)
        outcome = self._complete(request, cancel)
        if outcome.kind is OutcomeKind.TRANSIENT_FAILURE:
            raise TransientUpstreamError(endpoint=request.identifier, details=outcome.cause)
        if outcome.kind is OutcomeKind.EMPTY:
            raise EmptyModelOutput(endpoint=request.identifier)
        try:
            return validate_acronym_payload(outcome.text)
        except ModelOutputError as exc:
            self.logger.error("Error parsing acronym response for %s: %s", request.identifier, exc)
            raise MalformedModelJson(endpoint=request.identifier, details=str(exc)) from exc

    def _quickstart(self, request: EndpointRequest, cancel: threading.Event | None) -> dict[str, Any]:
        if not request.identifier:
            raise ValidationError("Prompt parameter is required", endpoint=request.identifier)
        try:
            outcome = self._complete(request, cancel)
        except RateLimitedError as exc:
            raise TransientUpstreamError(endpoint=request.identifier, details=exc.details) from exc
        if outcome.kind is OutcomeKind.TRANSIENT_FAILURE:
            raise TransientUpstreamError(endpoint=request.identifier, details=outcome.cause)
        if outcome.kind is OutcomeKind.EMPTY:
            raise EmptyModelOutput("No response content from AI service", endpoint=request.identifier)
        return {"content": outcome.text}
