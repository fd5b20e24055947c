"""Utilities for robustly extracting JSON from LLM responses."""

from __future__ import annotations
import json
import re
from typing import Any, Optional

_DECODER = json.JSONDecoder()


def _strip_code_fences(text: str) -> str:
    """Remove surrounding ```...``` fences (with or without 'json') if present."""
    t = text.strip()
    if t.startswith("```") and t.endswith("```"):
        t = re.sub(r"^```[A-Za-z0-9_-]*\s*", "", t, flags=re.DOTALL)
        t = re.sub(r"\s*```$", "", t, flags=re.DOTALL)
    return t.strip()


def _scan(text: str, opener: str) -> Optional[Any]:
    """Return the first value starting at an `opener` char that decodes cleanly."""
    start = text.find(opener)
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(text, start)
            return value
        except json.JSONDecodeError:
            start = text.find(opener, start + 1)
    return None


def find_object(text: Optional[str]) -> Optional[dict]:
    """
    Return the first well-formed JSON object embedded anywhere in `text`,
    or None. Prose before/after the object and code fences are tolerated.
    """
    if not text or not isinstance(text, str):
        return None
    t = _strip_code_fences(text)
    try:
        data = json.loads(t)
        if isinstance(data, dict):
            return data
    except ValueError:
        pass
    data = _scan(t, "{")
    return data if isinstance(data, dict) else None


def extract_json(text: Optional[str]) -> Any:
    """
    Extract and parse the first JSON object/array from an LLM response.
    - Safely handles code fences and leading/trailing prose.
    - Returns dict / list on success, or {} on failure.
    """
    if not text:
        return {}
    t = _strip_code_fences(text)

    try:
        data = json.loads(t)
        if isinstance(data, (dict, list)):
            return data
    except ValueError:
        pass

    candidates = [i for i in (t.find("{"), t.find("[")) if i != -1]
    if not candidates:
        return {}
    opener = t[min(candidates)]
    value = _scan(t, opener)
    if value is None:
        value = _scan(t, "[" if opener == "{" else "{")
    return value if value is not None else {}


def require_array(text: str, err: str = "Expected a JSON array.") -> list:
    """Strict: must return an array, else raise."""
    data = extract_json(text)
    if not isinstance(data, list):
        raise ValueError(err)
    return data
