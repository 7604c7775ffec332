# File: freshlink/services/json_repair.py

"""
Best-effort recovery of JSON emitted by language models.

Models wrap JSON in markdown fences, add comments, leave trailing commas,
forget to quote keys and get cut off mid-object when they hit the token
limit. ``parse_json_reply`` tries, in order:

  1. the extracted payload as-is
  2. the payload after ``sanitize_json_string``
  3. the sanitized payload after ``balance_json_string``

and returns ``None`` when none of them parse.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_FENCED_RE = re.compile(r"```\s*(.*?)```", re.DOTALL)
_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"', re.DOTALL)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n\r]*")
_FENCE_MARKER_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")
_BARE_KEY_RE = re.compile(r"(^|[{,])(\s*)([A-Za-z_$@][A-Za-z0-9_$@-]*)(\s*):")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_REPEATED_COMMA_RE = re.compile(r",(\s*,)+")

_CLOSERS = {"{": "}", "[": "]"}


def extract_json_payload(text: str) -> str:
    """Cut the most likely JSON document out of a chatty reply."""
    fenced = _FENCED_JSON_RE.search(text)
    if fenced and fenced.group(1).strip():
        return fenced.group(1).strip()

    # Untagged fences only count when they hold an object or array.
    for block in _FENCED_RE.finditer(text):
        body = block.group(1).strip()
        if body.startswith(("{", "[")):
            return body

    first_brace, last_brace = text.find("{"), text.rfind("}")
    if first_brace != -1 and first_brace < last_brace:
        return text[first_brace:last_brace + 1].strip()

    first_bracket, last_bracket = text.find("["), text.rfind("]")
    if first_bracket != -1 and first_bracket < last_bracket:
        return text[first_bracket:last_bracket + 1].strip()

    # Truncated replies have an opening brace and nothing to pair it with.
    if first_brace != -1:
        return text[first_brace:].strip()

    return text.strip()


def _outside_strings(text: str, fn: Callable[[str], str]) -> str:
    """Apply ``fn`` to every stretch of ``text`` that is not a JSON string literal."""
    out: List[str] = []
    pos = 0
    for match in _STRING_RE.finditer(text):
        out.append(fn(text[pos:match.start()]))
        out.append(match.group(0))
        pos = match.end()
    out.append(fn(text[pos:]))
    return "".join(out)


def _clean_structure(segment: str) -> str:
    segment = _BLOCK_COMMENT_RE.sub("", segment)
    segment = _LINE_COMMENT_RE.sub("", segment)
    segment = _FENCE_MARKER_RE.sub("", segment)
    segment = _BARE_KEY_RE.sub(r'\1\2"\3"\4:', segment)
    segment = _REPEATED_COMMA_RE.sub(",", segment)
    return segment


def sanitize_json_string(text: str) -> str:
    """
    Fix the usual model mistakes without touching string contents:
    comments, stray fences, control characters, bare keys, trailing and
    repeated commas.
    """
    out = _CONTROL_CHARS_RE.sub("", text)
    out = _outside_strings(out, _clean_structure)
    # Trailing commas can sit on either side of a removed comment, so they
    # are stripped after the structural pass has joined the pieces.
    out = _outside_strings(out, lambda s: _TRAILING_COMMA_RE.sub(r"\1", s))
    return out.strip()


def balance_json_string(text: str, trim_tail: bool = False) -> str:
    """
    Close whatever a truncated reply left open.

    With ``trim_tail`` everything after the last ``}``/``]`` is dropped
    first. Then an unterminated string is closed and the open brackets /
    braces are closed innermost first.
    """
    candidate = text.rstrip()
    if trim_tail:
        last = max(candidate.rfind("}"), candidate.rfind("]"))
        if last != -1:
            candidate = candidate[:last + 1]

    stack: List[str] = []
    in_string = False
    escaped = False
    for ch in candidate:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]") and stack and stack[-1] == ch:
            stack.pop()

    if in_string:
        if escaped:
            candidate = candidate[:-1]
        candidate += '"'
    candidate = candidate.rstrip().rstrip(",")
    candidate += "".join(reversed(stack))
    return sanitize_json_string(candidate)


def _loads(text: str) -> Any:
    return json.loads(text, strict=False)


def parse_json_reply(raw: str) -> Optional[Any]:
    payload = extract_json_payload(raw)
    try:
        return _loads(payload)
    except json.JSONDecodeError:
        pass

    sanitized = sanitize_json_string(payload)
    try:
        return _loads(sanitized)
    except json.JSONDecodeError:
        pass

    error: Optional[json.JSONDecodeError] = None
    for trim_tail in (False, True):
        try:
            return _loads(balance_json_string(sanitized, trim_tail=trim_tail))
        except json.JSONDecodeError as e:
            error = e

    logger.warning(
        "[ai] Unable to parse model JSON after sanitization and repair: %s\n"
        "Original payload: %s\nSanitized payload: %s",
        error,
        payload,
        sanitized,
    )
    return None
