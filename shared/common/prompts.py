from __future__ import annotations

from collections.abc import Sequence

from shared.common.records import EndpointKind, PromptPair


ACRONYM_COUNT = 10

ACRONYM_SYSTEM_PROMPT = (
    "You are a playful and witty assistant that generates clever, light-hearted, and family-friendly "
    "acronyms for a given word. The acronyms should feel creative, delightful, and suitable for display "
    "to a general audience. Avoid anything mean-spirited, crude, political, or controversial. Each acronym "
    "should expand each letter of the input word into one English word. Avoid repeating the same words "
    "across the acronyms. For example, 'DOG' could expand to 'Daring Optimistic Genius'. Return your output "
    'in this JSON format: { "acronyms": ["Acronym 1", "Acronym 2", ...], '
    '"metadata": { "word": "WORD", "count": N } }.'
)

QUICKSTART_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates HTML-formatted responses. "
    "Keep responses concise and well-formatted."
)


def _persona(api_host: str, owner: str) -> str:
    if owner:
        return f"You are {owner}'s helpful and playful API assistant that lives at {api_host}"
    return f"You are a helpful and playful API assistant that lives at {api_host}"


def build_generic_prompts(
    identifier: str,
    fields: Sequence[str] | None = None,
    *,
    api_host: str = "api.example.com",
    owner: str = "",
) -> PromptPair:
    field_list = ", ".join(fields) if fields else ""
    system_prompt = (
        f"{_persona(api_host, owner)} and generates JSON responses for any endpoint requested by the user. "
        f"This request is for the {api_host}/{identifier} endpoint."
    )
    if field_list:
        system_prompt += f" The response must include these specific fields: {field_list}."
    system_prompt += (
        " You must respond with ONLY valid JSON - no extra text, no markdown formatting, no explanations."
        " Ensure all JSON strings are properly escaped. The JSON must be complete and parseable."
        " Always return at least one key-value pair."
        " Never return empty objects or arrays unless specifically requested."
    )

    user_prompt = f"Create a JSON response for the endpoint: {identifier}"
    if field_list:
        user_prompt += f" with the following fields: {field_list}"
    user_prompt += ". Ensure the response is valid, complete JSON with meaningful content."
    return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)


def build_acronym_prompts(word: str) -> PromptPair:
    return PromptPair(
        system_prompt=ACRONYM_SYSTEM_PROMPT,
        user_prompt=(
            f'Generate {ACRONYM_COUNT} clever, light-hearted, and family-friendly acronyms for the word "{word}". '
            "Each acronym should expand the word letter-by-letter. Ensure the acronyms are varied, playful, "
            "and suitable for all ages. Return the output as JSON as described above."
        ),
    )


def build_quickstart_prompts(prompt: str) -> PromptPair:
    return PromptPair(
        system_prompt=QUICKSTART_SYSTEM_PROMPT,
        user_prompt=f'Write a title and a short response for the prompt "{prompt}". Format the result as HTML.',
    )


def build_prompts(
    kind: EndpointKind,
    identifier: str,
    fields: Sequence[str] | None = None,
    *,
    api_host: str = "api.example.com",
    owner: str = "",
) -> PromptPair:
    if kind is EndpointKind.ACRONYM:
        return build_acronym_prompts(identifier)
    if kind is EndpointKind.QUICKSTART:
        return build_quickstart_prompts(identifier)
    return build_generic_prompts(identifier, fields, api_host=api_host, owner=owner)
