"""Validation boundary for JSON returned by LLM providers.

Model output is untrusted: it may be wrapped in a markdown fence, be truncated,
or have the wrong shape. ``parse_llm_json`` accepts exactly one JSON object
(optionally inside a single ```json fence) and validates it against a pydantic
model. Anything else becomes an ``Unparseable`` value that callers must handle.
"""

from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


@dataclass
class Unparseable:
    raw: str
    reason: str


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    first_newline = stripped.find("\n")
    if first_newline == -1 or not stripped.endswith("```"):
        return stripped
    return stripped[first_newline + 1 : -3].strip()


def parse_llm_json(text: str, model: type[T]) -> T | Unparseable:
    body = strip_code_fence(text or "")
    if not body:
        return Unparseable(raw=text or "", reason="empty response")
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        return Unparseable(raw=text, reason=f"{e.error_count()} validation error(s)")
