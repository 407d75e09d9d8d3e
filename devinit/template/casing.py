"""Identifier casing helpers used to derive project-name variants.

All functions are pure and idempotent on their own output, e.g.
``to_snake(to_snake(x)) == to_snake(x)``.
"""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[-_\s]+")


def to_snake(value: str) -> str:
    """Convert ``MyAPI-Project`` or ``my-project`` to ``my_api_project``.

    An uppercase run is kept together as one word, so acronyms do not get
    split into single letters.
    """
    s1 = value.replace("-", "_")
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    s3 = re.sub(r"([A-Z])([A-Z][a-z])", r"\1_\2", s2)
    return re.sub(r"_+", "_", s3.lower())


def to_kebab(value: str) -> str:
    """Convert ``MyAPIProject`` to ``my-a-p-i-project``.

    Every uppercase letter after the first character starts a new word.
    """
    chars: list[str] = []
    for index, char in enumerate(value.replace("_", "-")):
        if index > 0 and char.isupper():
            chars.append("-")
        chars.append(char.lower())
    return re.sub(r"-+", "-", "".join(chars))


def to_camel(value: str) -> str:
    """Convert ``my-api-project`` or ``my_api_project`` to ``myApiProject``."""
    parts = [part for part in _SEPARATORS.split(value) if part]
    if not parts:
        return ""
    head = parts[0]
    head = head.lower() if head.isupper() else head[0].lower() + head[1:]
    return head + "".join(_capitalize(part) for part in parts[1:])


def to_pascal(value: str) -> str:
    """Convert ``my_api_project`` or ``my-api-project`` to ``MyApiProject``."""
    return "".join(_capitalize(part) for part in _SEPARATORS.split(value) if part)


def _capitalize(value: str) -> str:
    """Uppercase the first character and leave the rest untouched."""
    return value[:1].upper() + value[1:]
