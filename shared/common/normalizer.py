from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from shared.common.records import CompletionOutcome, NormalizedResult, OutcomeKind
from shared.common.serialization import json_loads, strip_code_fence


FALLBACK_STATUS = "playful_response"
FALLBACK_NOTE = "This endpoint is powered by AI creativity"


class ModelOutputError(ValueError):
    def __init__(self, reason: str, detail: str) -> None:
        self.reason = reason
        super().__init__(detail)


def parse_model_object(text: str | None, *, require_keys: bool = False) -> dict[str, Any]:
    """Parse model text into a JSON object, tolerating surrounding whitespace and code fences.

    Raises ModelOutputError with a short reason when the text is empty, not JSON,
    not an object, or (when ``require_keys``) an object without keys.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ModelOutputError("empty_response", "model returned empty content")
    cleaned = strip_code_fence(cleaned)
    if not cleaned:
        raise ModelOutputError("empty_response", "model returned an empty code block")
    try:
        value = json_loads(cleaned)
    except ValueError as exc:
        raise ModelOutputError("invalid_json", f"model output is not valid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise ModelOutputError("not_an_object", f"model output is a JSON {type(value).__name__}, not an object")
    if require_keys and not value:
        raise ModelOutputError("empty_object", "model output is an empty object")
    return value


def build_fallback(identifier: str, reason: str) -> dict[str, Any]:
    return {
        "message": f"Welcome to the {identifier} endpoint!",
        "status": FALLBACK_STATUS,
        "note": FALLBACK_NOTE,
        "endpoint": identifier,
        "fallback_reason": reason,
    }


def filter_fields(source: dict[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    return {name: source[name] if name in source else f"Generated value for {name}" for name in fields}


def fallback_result(identifier: str, reason: str, fields: Sequence[str] | None = None) -> NormalizedResult:
    value = build_fallback(identifier, reason)
    if fields:
        value = filter_fields(value, fields)
    return NormalizedResult(value=value, fallback_reason=reason)


def _outcome_reason(outcome: CompletionOutcome) -> str:
    if outcome.kind is OutcomeKind.EMPTY:
        return "empty_response"
    return "upstream_unavailable"


def normalize(outcome: CompletionOutcome, identifier: str, fields: Sequence[str] | None = None) -> NormalizedResult:
    """Turn a completion outcome into the object returned by the catch-all endpoint.

    Parsed model output passes through untouched; anything unusable becomes the
    fallback object, projected onto ``fields`` when they were requested.
    """
    if outcome.kind is not OutcomeKind.SUCCESS:
        return fallback_result(identifier, _outcome_reason(outcome), fields)
    try:
        value = parse_model_object(outcome.text, require_keys=bool(fields))
    except ModelOutputError as exc:
        return fallback_result(identifier, exc.reason, fields)
    return NormalizedResult(value=value)


class AcronymPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    acronyms: list[Any] = Field(..., min_length=1)
    metadata: Any = None


def validate_acronym_payload(text: str | None) -> dict[str, Any]:
    """Parse an acronym reply; the returned object is the model's own, not a re-serialized copy."""
    value = parse_model_object(text)
    try:
        AcronymPayload.model_validate(value)
    except PydanticValidationError as exc:
        raise ModelOutputError("invalid_schema", "missing or empty acronyms array") from exc
    return value
