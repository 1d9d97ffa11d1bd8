from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


ACRONYM_MAX_LENGTH = 20


class EndpointKind(str, Enum):
    GENERIC = "generic"
    ACRONYM = "acronym"
    QUICKSTART = "quickstart"


@dataclass(frozen=True, slots=True)
class EndpointRequest:
    kind: EndpointKind
    identifier: str
    fields: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class PromptPair:
    system_prompt: str
    user_prompt: str


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    TRANSIENT_FAILURE = "transient_failure"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class CompletionOutcome:
    kind: OutcomeKind
    text: str | None = None
    cause: str | None = None
    attempts: int = 0

    @classmethod
    def success(cls, text: str, *, attempts: int) -> "CompletionOutcome":
        return cls(OutcomeKind.SUCCESS, text=text, attempts=attempts)

    @classmethod
    def rate_limited(cls, cause: str, *, attempts: int) -> "CompletionOutcome":
        return cls(OutcomeKind.RATE_LIMITED, cause=cause, attempts=attempts)

    @classmethod
    def unauthorized(cls, cause: str, *, attempts: int) -> "CompletionOutcome":
        return cls(OutcomeKind.UNAUTHORIZED, cause=cause, attempts=attempts)

    @classmethod
    def transient_failure(cls, cause: str, *, attempts: int) -> "CompletionOutcome":
        return cls(OutcomeKind.TRANSIENT_FAILURE, cause=cause, attempts=attempts)

    @classmethod
    def empty(cls, *, attempts: int) -> "CompletionOutcome":
        return cls(OutcomeKind.EMPTY, cause="empty model output", attempts=attempts)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass(frozen=True, slots=True)
class NormalizedResult:
    value: dict[str, Any]
    fallback_reason: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None
