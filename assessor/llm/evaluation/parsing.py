"""Helpers for turning chat model responses into text and JSON."""

from __future__ import annotations

import json
import re as regex
import typing as t

CodeFence = regex.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", regex.DOTALL)
EmbeddedObject = regex.compile(r"\{.*\}", regex.DOTALL)


def get_content_str(content: t.Any) -> str:
    """Extract string content from a LangChain message content field."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for item in t.cast(list[t.Any], content):
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and item.get("type") == "text":
                parts.append(str(item.get("text", "")))
        return " ".join(parts)
    return str(content)


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole response, if any."""
    match = CodeFence.match(text)
    return match.group(1).strip() if match else text.strip()


def parse_json_object(text: str) -> dict[str, t.Any]:
    """Parse a JSON object from a response which may be fenced or padded with prose.

    Raises:
        ValueError: no JSON object could be recovered
    """
    stripped = strip_code_fences(text)
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        match = EmbeddedObject.search(stripped)
        if match is None:
            raise ValueError("response does not contain a JSON object") from None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ValueError(f"response contains malformed JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return t.cast(dict[str, t.Any], parsed)
