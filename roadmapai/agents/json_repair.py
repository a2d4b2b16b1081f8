# roadmapai/agents/json_repair.py
"""
Best-effort recovery of JSON objects from model output.

Two independent paths:
- parse_json_object: fence stripping, outer-object slicing and syntax repair
  followed by one strict json.loads.
- extract_day_objects: lenient scan that pulls individual day objects out of
  text the strict path could not parse.
"""
import json
import re

REQUIRED_TOPIC_KEYS = ("day", "topic", "content", "resources")

_FENCE_OPEN = re.compile(r"^\s*```(?:json|JSON)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```\s*$")

# Double-quoted string literals are matched first so the alternatives never
# rewrite text inside them.
_STRING = r'"(?:\\.|[^"\\])*"'
_TRAILING_COMMA = re.compile(_STRING + r"|,(\s*[}\]])")
_BARE_KEY = re.compile(
    _STRING + r"|([{,]\s*)(?:'((?:\\.|[^'\\])*)'|([A-Za-z_$][\w$-]*))(\s*:)"
)
_ESCAPED_STRUCTURE = re.compile(r'^\s*[{\[]\s*\\"')
_DAY_FIELD = re.compile(r'"day"\s*:\s*(\d+)')


def strip_code_fences(text: str) -> str:
    text = text.strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    return _FENCE_CLOSE.sub("", text, count=1)


def slice_outer_object(text: str) -> str:
    """Cut to the span from the first '{' to the last '}' when both exist."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start:end + 1]


def _drop_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA.sub(lambda m: m.group(1) if m.group(1) is not None else m.group(0), text)


def _quote_keys(text: str) -> str:
    def repl(m: re.Match) -> str:
        prefix = m.group(1)
        if prefix is None:
            return m.group(0)
        key = m.group(2) if m.group(2) is not None else m.group(3)
        key = key.replace('\\"', '"').replace('"', '\\"')
        return f'{prefix}"{key}"{m.group(4)}'

    return _BARE_KEY.sub(repl, text)


def repair_json_syntax(text: str) -> str:
    # Whole payload escaped once too often, e.g. {\"day\": 1}
    if _ESCAPED_STRUCTURE.match(text):
        text = text.replace('\\"', '"')
    text = _quote_keys(text)
    return _drop_trailing_commas(text)


def clean_model_json(text: str) -> str:
    return repair_json_syntax(slice_outer_object(strip_code_fences(text)))


def parse_json_object(text: str) -> dict | None:
    """Strict parse of the repaired text. Returns None unless it is an object."""
    try:
        data = json.loads(clean_model_json(text))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _string_mask(text: str) -> list[bool]:
    """Per-character flag: True when the character sits inside a string literal."""
    mask = [False] * len(text)
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            mask[i] = True
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            mask[i] = True
    return mask


def _enclosing_object_start(text: str, pos: int, in_string: list[bool]) -> int:
    depth = 0
    for i in range(pos, -1, -1):
        if in_string[i]:
            continue
        ch = text[i]
        if ch == "}":
            depth += 1
        elif ch == "{":
            if depth == 0:
                return i
            depth -= 1
    return -1


def _matching_object_end(text: str, start: int, in_string: list[bool]) -> int:
    depth = 0
    for i in range(start, len(text)):
        if in_string[i]:
            continue
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_day_objects(text: str) -> list[dict]:
    """
    Recover every parseable day object from malformed output.

    For each "day": <n> occurrence, walk back to the enclosing '{', forward to
    its matching '}', and parse that object on its own. Objects that do not
    parse, or lack any of day/topic/content/resources, are dropped.
    """
    found: list[dict] = []
    seen_starts: set[int] = set()
    in_string = _string_mask(text)

    for m in _DAY_FIELD.finditer(text):
        start = _enclosing_object_start(text, m.start(), in_string)
        if start == -1 or start in seen_starts:
            continue
        end = _matching_object_end(text, start, in_string)
        if end == -1:
            continue
        seen_starts.add(start)

        snippet = repair_json_syntax(text[start:end + 1])
        try:
            obj = json.loads(snippet)
        except ValueError:
            continue
        if isinstance(obj, dict) and all(k in obj for k in REQUIRED_TOPIC_KEYS):
            found.append(obj)

    return found
