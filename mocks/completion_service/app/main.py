from __future__ import annotations

import json
import re
import time
import uuid

import uvicorn
from fastapi import FastAPI


app = FastAPI(title="Mock Completion Service")

WORD_BANK = {
    "A": ["Amazing", "Artful", "Adventurous"],
    "B": ["Brave", "Bouncy", "Brilliant"],
    "C": ["Cheerful", "Curious", "Clever"],
    "D": ["Daring", "Dazzling", "Dreamy"],
    "E": ["Eager", "Epic", "Energetic"],
    "F": ["Friendly", "Fearless", "Funky"],
    "G": ["Genius", "Gleeful", "Gentle"],
    "H": ["Happy", "Heroic", "Humble"],
    "I": ["Inventive", "Inspired", "Iconic"],
    "J": ["Jolly", "Jazzy", "Joyful"],
    "K": ["Kind", "Keen", "Kooky"],
    "L": ["Lively", "Lucky", "Luminous"],
    "M": ["Merry", "Mighty", "Magical"],
    "N": ["Nimble", "Noble", "Nifty"],
    "O": ["Optimistic", "Original", "Outgoing"],
    "P": ["Playful", "Plucky", "Peppy"],
    "Q": ["Quirky", "Quick", "Quiet"],
    "R": ["Radiant", "Rowdy", "Resourceful"],
    "S": ["Sunny", "Snappy", "Spirited"],
    "T": ["Terrific", "Thoughtful", "Twinkly"],
    "U": ["Upbeat", "Unique", "Unstoppable"],
    "V": ["Vivid", "Valiant", "Vibrant"],
    "W": ["Witty", "Wondrous", "Warm"],
    "X": ["Xenial", "Xtra", "Xylophonic"],
    "Y": ["Youthful", "Yummy", "Yodeling"],
    "Z": ["Zany", "Zesty", "Zippy"],
}

_QUOTED_WORD_RE = re.compile(r'for the word "([^"]*)"')
_ENDPOINT_RE = re.compile(r"for the endpoint: (\S+?)(?: with the following fields: (.*?))?\. Ensure")


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


def _acronyms(word: str, count: int = 10) -> list[str]:
    letters = [char.upper() for char in word if char.isalnum()]
    results: list[str] = []
    for index in range(count):
        words = []
        for position, letter in enumerate(letters):
            bank = WORD_BANK.get(letter, [letter])
            words.append(bank[(index + position) % len(bank)])
        results.append(" ".join(words))
    return results


def _reply(system_prompt: str, user_prompt: str, json_mode: bool) -> str:
    lowered = user_prompt.lower()
    if "empty" in lowered:
        return ""
    if "invalid" in lowered:
        return "Sorry, I can only describe this endpoint in prose today."
    if '"acronyms"' in system_prompt:
        match = _QUOTED_WORD_RE.search(user_prompt)
        word = match.group(1) if match else ""
        return json.dumps({"acronyms": _acronyms(word), "metadata": {"word": word, "count": 10}})
    if json_mode:
        match = _ENDPOINT_RE.search(user_prompt)
        endpoint = match.group(1) if match else "default"
        payload: dict[str, object] = {"endpoint": endpoint, "message": f"Hello from /{endpoint}"}
        if match and match.group(2):
            for field in match.group(2).split(","):
                payload[field.strip()] = f"mock {field.strip()}"
        return json.dumps(payload)
    return f"<h1>Quickstart</h1><p>{user_prompt}</p>"


@app.post("/v1/chat/completions")
def chat_completions(request: dict[str, object]) -> dict[str, object]:
    messages = request.get("messages", [])
    message_list = messages if isinstance(messages, list) else []
    system_prompt = ""
    user_prompt = ""
    for message in message_list:
        if not isinstance(message, dict):
            continue
        if message.get("role") == "system":
            system_prompt = str(message.get("content", ""))
        elif message.get("role") == "user":
            user_prompt = str(message.get("content", ""))
    response_format = request.get("response_format")
    json_mode = isinstance(response_format, dict) and response_format.get("type") == "json_object"
    content = _reply(system_prompt, user_prompt, json_mode)
    return {
        "id": f"chatcmpl-{uuid.uuid4().hex[:24]}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": str(request.get("model", "mock-model")),
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
    }


def main() -> None:
    uvicorn.run(app, host="0.0.0.0", port=8080)


if __name__ == "__main__":
    main()
