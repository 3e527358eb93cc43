# student_hub/utils/ai_json.py
"""Recover JSON payloads from generative model output."""
import json
import re
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from student_hub.core.exceptions import MalformedAIResponse

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_EMBEDDED_PATTERNS = {
    dict: re.compile(r"\{[\s\S]*\}"),
    list: re.compile(r"\[[\s\S]*\]"),
}


def extract_json(text: str, expected: type = dict) -> Any:
    """
    Return the JSON value of type ``expected`` (dict or list) carried by ``text``.

    Tries, in order: the whole text, the first fenced code block, then the
    widest embedded ``{...}`` / ``[...]`` span.
    """
    if not text or not text.strip():
        raise MalformedAIResponse("AI response was empty")

    candidates = [text.strip()]
    fence = _FENCE_PATTERN.search(text)
    if fence:
        candidates.append(fence.group(1).strip())
    embedded = _EMBEDDED_PATTERNS[expected].search(text)
    if embedded:
        candidates.append(embedded.group(0))

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(value, expected):
            return value

    raise MalformedAIResponse(
        f"AI response did not contain a JSON {'object' if expected is dict else 'array'}"
    )


def parse_ai_model(text: str, model: Type[ModelT]) -> ModelT:
    """Extract a JSON object from ``text`` and validate it against ``model``"""
    payload = extract_json(text, dict)
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedAIResponse(
            f"AI response was not in the expected format ({e.error_count()} problems)"
        ) from e
