"""Bounded repair of near-JSON model output.

Two attempts only: a strict parse of the extracted object, then one parse
after trailing commas are dropped and missing closers are appended. Anything
still invalid is a ReportParseError; nothing here guesses at content.
"""

import json
import re

from errors import ReportParseError

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*[}\]]")
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    return _FENCE.sub("", text or "").strip()


def extract_object_span(text: str) -> str:
    """From the first '{' to the last '}' (or to the end when none closes)."""
    start = text.find("{")
    if start == -1:
        return text
    end = text.rfind("}")
    if end < start:
        return text[start:]
    return text[start : end + 1]


def strip_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing bracket, outside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "," and _TRAILING_COMMA.match(text, i):
            continue
        out.append(ch)
    return "".join(out)


def balance_brackets(text: str) -> str:
    """
    Append the closers for every '{' / '[' left open, innermost first.
    Brackets inside string literals are ignored. Text with a mismatched
    closer is returned unchanged.
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
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
        elif ch in ("}", "]"):
            if not stack or stack.pop() != ch:
                return text
    return text + "".join(reversed(stack))


def repair_json_text(text: str) -> str:
    repaired = strip_trailing_commas(text.rstrip())
    repaired = balance_brackets(repaired)
    return strip_trailing_commas(repaired)


def parse_model_json(raw_text: str) -> dict:
    """
    Parse a model response into a dict.

    Raises:
        ReportParseError: both the strict and the repaired parse failed, or
            the result is not a JSON object.
    """
    candidate = extract_object_span(strip_code_fences(raw_text))
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as first_error:
        try:
            parsed = json.loads(repair_json_text(candidate))
        except json.JSONDecodeError:
            raise ReportParseError(
                f"Failed to parse model response as JSON: {first_error}", raw_text=raw_text
            ) from first_error

    if not isinstance(parsed, dict):
        raise ReportParseError("Model response is not a JSON object.", raw_text=raw_text)
    return parsed
