import re
from typing import Optional

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)\s*```")


def extract_first_json(text: str) -> Optional[str]:
    start = text.find("{")
    if start == -1:
        return None

    stack = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]

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
        elif ch == "{":
            stack += 1
        elif ch == "}":
            stack -= 1
            if stack == 0:
                return text[start:i + 1]

    return None


def extract_json(text: str) -> Optional[str]:
    """
    Pull the JSON object out of raw model output.

    Tries a ```json fence, then any ``` fence, then the first balanced
    {...} object in the text.
    """
    if not text:
        return None

    for pattern in (_FENCED_JSON, _FENCED_ANY):
        match = pattern.search(text)
        if match:
            candidate = extract_first_json(match.group(1))
            if candidate:
                return candidate

    return extract_first_json(text)
