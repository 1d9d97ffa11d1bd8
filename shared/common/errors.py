from __future__ import annotations

from pydantic import BaseModel


class ErrorBody(BaseModel):
    error: str
    message: str
    endpoint: str = ""
    details: str | None = None


class ApiError(Exception):
    status_code = 500
    code = "API_ERROR"
    default_message = "An error occurred while processing your request."

    def __init__(self, message: str | None = None, *, endpoint: str = "", details: str | None = None) -> None:
        self.message = message or self.default_message
        self.endpoint = endpoint
        self.details = details
        super().__init__(self.message)

    def to_body(self, *, include_details: bool = False) -> dict[str, object]:
        body = ErrorBody(
            error=self.code,
            message=self.message,
            endpoint=self.endpoint,
            details=self.details if include_details else None,
        )
        return body.model_dump(exclude_none=True)


class ConfigurationError(ApiError):
    code = "CONFIGURATION_ERROR"
    default_message = "Server configuration error"


class ValidationError(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class RateLimitedError(ApiError):
    status_code = 429
    code = "RATE_LIMITED"
    default_message = "API rate limit exceeded. Please try again later."


class AuthError(ApiError):
    # Upstream auth failures are reported to clients as a generic server error.
    code = "UNAUTHORIZED"
    default_message = "API authentication failed."


class TransientUpstreamError(ApiError):
    code = "AI_SERVICE_ERROR"
    default_message = "Error communicating with AI service"


class EmptyModelOutput(ApiError):
    code = "Invalid response from AI service"
    default_message = "The AI service returned empty content."


class MalformedModelJson(ApiError):
    code = "Invalid response from AI service"
    default_message = "The AI service returned a response in an unexpected format."
