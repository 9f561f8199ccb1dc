"""Parsing of free-form AI responses into JSON objects.

Chain: strip markdown code fences -> direct ``json.loads`` -> scan for the
outermost ``{...}`` block and parse that.
"""

import json
import re

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AIJsonParseError(ValueError):
    """The AI response held no parsable JSON object."""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if present."""
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text.strip()


def parse_ai_json(text: str | None) -> dict:
    """Extract a JSON object from an AI response.

    Raises:
        AIJsonParseError: No stage of the chain produced a JSON object.
    """
    if not text or not text.strip():
        raise AIJsonParseError("Empty AI response")

    cleaned = strip_code_fences(text)

    try:
        parsed = json.loads(cleaned)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    # Fall back to the outermost brace block in surrounding prose
    match = _OBJECT_RE.search(cleaned)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except ValueError as e:
            raise AIJsonParseError(f"Could not parse JSON from response: {e}") from e
        if isinstance(parsed, dict):
            return parsed

    raise AIJsonParseError("Could not parse JSON from response")
