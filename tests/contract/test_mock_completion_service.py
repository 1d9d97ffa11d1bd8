from fastapi.testclient import TestClient

from mocks.completion_service.app.main import app


client = TestClient(app)


def chat(system: str, user: str, *, json_mode: bool = True) -> str:
    body: dict[str, object] = {
        "model": "mock",
        "messages": [{"role": "system", "content": system}, {"role": "user", "content": user}],
    }
    if json_mode:
        body["response_format"] = {"type": "json_object"}
    response = client.post("/v1/chat/completions", json=body)
    assert response.status_code == 200
    payload = response.json()
    assert payload["object"] == "chat.completion"
    return str(payload["choices"][0]["message"]["content"])


def test_healthz() -> None:
    assert client.get("/healthz").json() == {"status": "ok"}


def test_acronym_reply_expands_each_letter() -> None:
    content = chat('Return { "acronyms": [...] }', 'Generate 10 acronyms for the word "cat". Go.')
    assert '"acronyms"' in content
    assert "Cheerful Artful Twinkly" in content


def test_plain_reply_is_html() -> None:
    content = chat("HTML please", 'Write a title for the prompt "hi".', json_mode=False)
    assert content.startswith("<h1>")


def test_keyword_triggers() -> None:
    assert chat("sys", "Create a JSON response for the endpoint: empty. Ensure it.") == ""
    assert not chat("sys", "Create a JSON response for the endpoint: invalid. Ensure it.").startswith("{")
