"""Lenient JSON extraction from language model replies."""

import json
import re
from typing import Any, Callable, Dict, Optional


_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.MULTILINE)

_decoder = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    """Strip Markdown code fences if present and trim whitespace."""
    if not text:
        return ""
    return _CODE_FENCE_RE.sub("", text.strip()).strip()


def extract_json_object(
    text: str,
    accept: Optional[Callable[[Dict[str, Any]], bool]] = None
) -> Optional[Dict[str, Any]]:
    """
    Extract the first well-formed JSON object from free text.

    Models often wrap the payload in prose or code fences. Each opening
    brace is tried in turn and the first one that decodes to a complete
    object, and passes ``accept`` when given, wins.

    Args:
        text: Raw model reply
        accept: Optional check an object must pass to be returned

    Returns:
        Parsed object, or None if the text holds no acceptable JSON object
    """
    s = strip_code_fences(text)
    if not s:
        return None

    def _acceptable(parsed: Any) -> bool:
        return isinstance(parsed, dict) and (accept is None or accept(parsed))

    try:
        parsed = json.loads(s)
    except ValueError:
        parsed = None
    if _acceptable(parsed):
        return parsed

    start = s.find("{")
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(s, start)
        except ValueError:
            parsed = None
        if _acceptable(parsed):
            return parsed
        start = s.find("{", start + 1)

    return None
