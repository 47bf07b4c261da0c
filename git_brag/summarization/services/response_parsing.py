"""Extraction of JSON payloads from free-form model output."""

import json
from typing import Any


def extract_json_block(raw_text: str | None, open_char: str, close_char: str) -> str:
    """
    Cut the text between the first ``open_char`` and the last ``close_char``.

    Models tend to wrap JSON in prose ("Sure! [...] Thanks."). When the
    delimiters are missing or out of order the stripped text is returned as is.
    """
    text = (raw_text or "").strip()
    start = text.find(open_char)
    end = text.rfind(close_char)
    if start >= 0 and end > start:
        return text[start : end + 1]
    return text


def parse_json_array(raw_text: str | None) -> list[Any]:
    """
    Parse the JSON array embedded in a model response.

    Raises:
        ValueError: If no JSON array can be parsed
    """
    payload = json.loads(extract_json_block(raw_text, "[", "]"))
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")
    return payload


def parse_json_object(raw_text: str | None) -> dict[str, Any]:
    """
    Parse the JSON object embedded in a model response.

    Raises:
        ValueError: If no JSON object can be parsed
    """
    payload = json.loads(extract_json_block(raw_text, "{", "}"))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload
