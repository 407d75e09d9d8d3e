"""Version parsing and constraint matching.

Supported constraint operators::

    =1.2.3   exact (also the meaning of a bare version)
    >1.2.3   >=1.2.3   <1.2.3   <=1.2.3
    ^1.2.3   >=1.2.3 with the same major version
    ~1.2.3   >=1.2.3 with the same major and minor version
"""

from __future__ import annotations

from devinit.errors import InvalidVersionError

Version = tuple[int, int, int]

# Two-character operators must be tried before their one-character prefixes.
OPERATORS: tuple[str, ...] = (">=", "<=", ">", "<", "=", "^", "~")


def parse_version(version: str) -> Version:
    """Parse ``"v1.2.3"``, ``"1.2"`` or ``"3"`` into ``(major, minor, patch)``.

    Missing components default to 0; components past the third are ignored.

    Raises:
        InvalidVersionError: A present component is not a plain number.
    """
    text = version.strip()
    if text.startswith("v"):
        text = text[1:]

    parts = text.split(".")
    numbers = [0, 0, 0]
    for index, part in enumerate(parts[:3]):
        if not (part.isascii() and part.isdigit()):
            raise InvalidVersionError(
                version, f"invalid version {version!r}: component {part!r} is not numeric"
            )
        numbers[index] = int(part)
    return numbers[0], numbers[1], numbers[2]


def compare_versions(a: str | Version, b: str | Version) -> int:
    """Return -1, 0 or 1 as *a* is lower than, equal to, or higher than *b*."""
    left = parse_version(a) if isinstance(a, str) else a
    right = parse_version(b) if isinstance(b, str) else b
    return (left > right) - (left < right)


def parse_constraint(constraint: str) -> tuple[str, Version]:
    """Split a constraint into its operator and parsed version.

    A constraint without an operator means an exact match (``=``).

    Raises:
        InvalidVersionError: The version part does not parse.
    """
    text = constraint.strip()
    for operator in OPERATORS:
        if text.startswith(operator):
            return operator, parse_version(text[len(operator):].strip())
    return "=", parse_version(text)


def satisfies(current: str, constraint: str) -> bool:
    """Check whether version *current* meets *constraint*.

    Raises:
        InvalidVersionError: Either side does not parse.
    """
    current_parts = parse_version(current)
    operator, required = parse_constraint(constraint)
    comparison = compare_versions(current_parts, required)

    if operator == ">=":
        return comparison >= 0
    if operator == ">":
        return comparison > 0
    if operator == "<=":
        return comparison <= 0
    if operator == "<":
        return comparison < 0
    if operator == "^":
        return comparison >= 0 and current_parts[0] == required[0]
    if operator == "~":
        return comparison >= 0 and current_parts[:2] == required[:2]
    return comparison == 0
