from __future__ import annotations

import random
from datetime import datetime, timezone


FACTS = (
    "Every endpoint on this API is invented on the spot by a language model.",
    "Unknown paths never 404 here; they get a playful JSON answer instead.",
    "Ask for ?fields=a,b and the answer will be shaped around those keys.",
    "The acronym generator expands each letter of a word into a word of its own.",
    "When the model misbehaves, a friendly fallback response takes its place.",
    "The quickstart endpoint answers in HTML rather than JSON.",
)


def random_fact(rng: random.Random | None = None) -> dict[str, object]:
    chooser = rng or random
    return {
        "fact": chooser.choice(FACTS),
        "total_facts": len(FACTS),
    }


def structure_status() -> dict[str, str]:
    return {
        "message": "API structure is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "structure": "fastapi",
        "runtime": "uvicorn",
        "status": "success",
    }
