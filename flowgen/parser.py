"""
Extract the JSON payload from a free-text completion.

Models wrap their answer in prose or in a fenced code block more often than
not. ``parse_response`` tries, in order:

1. every fenced block (```` ``` ```` optionally tagged ``json``),
2. every balanced top-level ``{...}`` span in the raw text,

and returns the first value that decodes. When nothing decodes it returns a
``ParseFailure`` value rather than raising, so each pipeline stage can apply
its own fallback.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Iterator, Union

_FENCE_RE = re.compile(r"```[ \t]*(?:json)?[ \t]*\r?\n?(.*?)```", re.DOTALL | re.IGNORECASE)

EXCERPT_LENGTH = 200


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    excerpt: str = ""


ParseResult = Union[Any, ParseFailure]


def parse_response(text: str) -> ParseResult:
    if not isinstance(text, str) or not text.strip():
        return ParseFailure("empty response")

    for match in _FENCE_RE.finditer(text):
        block = match.group(1).strip()
        if not block:
            continue
        try:
            return json.loads(block)
        except json.JSONDecodeError:
            continue

    for span in _object_spans(text):
        try:
            return json.loads(span)
        except json.JSONDecodeError:
            continue

    return ParseFailure("no JSON object found", text.strip()[:EXCERPT_LENGTH])


def _object_spans(text: str) -> Iterator[str]:
    """Yield balanced top-level {...} spans, ignoring braces inside string literals."""
    depth = 0
    start = None
    in_string = False
    escaped = False
    for pos, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"' and depth > 0:
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = pos
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield text[start:pos + 1]
