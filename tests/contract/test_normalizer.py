import json

import pytest

from shared.common.normalizer import ModelOutputError, build_fallback, normalize, parse_model_object, validate_acronym_payload
from shared.common.records import CompletionOutcome
from shared.common.serialization import strip_code_fence


def success(text: str) -> CompletionOutcome:
    return CompletionOutcome.success(text, attempts=1)


def test_valid_json_passes_through_unchanged() -> None:
    payload = {"city": "Paris", "forecast": [{"day": 1, "temp": 21.5}], "sunny": True}
    result = normalize(success(json.dumps(payload)), "weather")
    assert not result.is_fallback
    assert result.value == payload
    assert json.loads(json.dumps(result.value)) == payload


def test_parsed_output_is_not_projected_onto_fields() -> None:
    result = normalize(success('{"temp": 20, "wind": "calm"}'), "weather", ("temp", "humidity"))
    assert result.value == {"temp": 20, "wind": "calm"}


def test_code_fence_is_stripped_before_parsing() -> None:
    result = normalize(success('  ```json\n{"ok": true}\n```  '), "status")
    assert result.value == {"ok": True}


def test_unparseable_text_yields_fallback() -> None:
    result = normalize(success("the weather is lovely"), "weather")
    assert result.is_fallback
    assert result.value == {
        "message": "Welcome to the weather endpoint!",
        "status": "playful_response",
        "note": "This endpoint is powered by AI creativity",
        "endpoint": "weather",
        "fallback_reason": "invalid_json",
    }


def test_fallback_is_filtered_to_requested_fields() -> None:
    result = normalize(success("not json"), "weather", ("temp", "humidity"))
    assert list(result.value) == ["temp", "humidity"]
    assert result.value == {
        "temp": "Generated value for temp",
        "humidity": "Generated value for humidity",
    }


def test_filtered_fallback_copies_known_keys_in_requested_order() -> None:
    result = normalize(success("[1, 2]"), "weather", ("endpoint", "extra", "status"))
    assert list(result.value) == ["endpoint", "extra", "status"]
    assert result.value["endpoint"] == "weather"
    assert result.value["status"] == "playful_response"
    assert result.value["extra"] == "Generated value for extra"


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("   ", "empty_response"),
        ("```json\n```", "empty_response"),
        ("[1, 2, 3]", "not_an_object"),
        ("null", "not_an_object"),
        ('"just a string"', "not_an_object"),
        ("{broken", "invalid_json"),
    ],
)
def test_unusable_output_reasons(text: str, reason: str) -> None:
    result = normalize(success(text), "things")
    assert result.fallback_reason == reason


def test_empty_object_is_only_rejected_when_fields_requested() -> None:
    assert normalize(success("{}"), "things").value == {}
    result = normalize(success("{}"), "things", ("name",))
    assert result.fallback_reason == "empty_object"
    assert result.value == {"name": "Generated value for name"}


def test_non_success_outcomes_fall_back() -> None:
    empty = normalize(CompletionOutcome.empty(attempts=1), "weather")
    failed = normalize(CompletionOutcome.transient_failure("boom", attempts=3), "weather")
    assert empty.fallback_reason == "empty_response"
    assert failed.fallback_reason == "upstream_unavailable"
    assert failed.value["message"] == "Welcome to the weather endpoint!"


def test_parse_model_object_requires_object() -> None:
    assert parse_model_object('{"acronyms": []}') == {"acronyms": []}
    with pytest.raises(ValueError):
        parse_model_object("[]")


def test_build_fallback_uses_identifier_verbatim() -> None:
    assert build_fallback("users/42", "invalid_json")["endpoint"] == "users/42"


def test_strip_code_fence_handles_partial_markers() -> None:
    assert strip_code_fence('```json {"a": 1}') == '{"a": 1}'
    assert strip_code_fence('{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'


def test_acronym_payload_is_returned_as_parsed() -> None:
    text = '```json\n{"acronyms": ["Daring Optimistic Genius"], "metadata": {"word": "DOG", "count": 1}, "extra": 1}\n```'
    assert validate_acronym_payload(text) == {
        "acronyms": ["Daring Optimistic Genius"],
        "metadata": {"word": "DOG", "count": 1},
        "extra": 1,
    }


@pytest.mark.parametrize("text", ['{"acronyms": []}', '{"acronyms": "DOG"}', '{"metadata": {"word": "DOG"}}'])
def test_acronym_payload_requires_non_empty_list(text: str) -> None:
    with pytest.raises(ModelOutputError) as excinfo:
        validate_acronym_payload(text)
    assert excinfo.value.reason == "invalid_schema"


@pytest.mark.parametrize("text", ['{"temp": NaN}', '{"temp": Infinity}', '{"temp": -Infinity}'])
def test_non_standard_number_constants_fall_back(text: str) -> None:
    result = normalize(success(text), "weather")
    assert result.fallback_reason == "invalid_json"
    assert result.value["message"] == "Welcome to the weather endpoint!"


def test_acronym_payload_rejects_non_standard_constants() -> None:
    with pytest.raises(ModelOutputError) as excinfo:
        validate_acronym_payload('{"acronyms": ["Daring Optimistic Genius"], "metadata": {"count": NaN}}')
    assert excinfo.value.reason == "invalid_json"
