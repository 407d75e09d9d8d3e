"""Project-name validation.

Names become directory names and package identifiers, so they are kept to a
portable subset and may not escape the working directory.
"""

from __future__ import annotations

import re
from pathlib import Path

from devinit.errors import InvalidProjectNameError

PROJECT_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")


def validate_project_name(name: str, base_dir: str | Path | None = None) -> None:
    """Check *name* against the naming rules.

    Args:
        name: Candidate project name.
        base_dir: Directory the project would be created in (defaults to
            the current working directory).

    Raises:
        InvalidProjectNameError: With a message naming the violated rule.
    """
    if not name:
        raise InvalidProjectNameError(name, "project name cannot be empty")

    if name in (".", ".."):
        raise InvalidProjectNameError(name, "invalid project name: '.' and '..' are not allowed")

    if "/" in name or "\\" in name:
        raise InvalidProjectNameError(name, "invalid project name: path separators are not allowed")

    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise InvalidProjectNameError(
            name,
            "invalid project name: must start with lowercase letter and contain "
            "only lowercase letters, numbers, and hyphens",
        )

    target = Path(base_dir or ".") / name
    if target.exists() or target.is_symlink():
        raise InvalidProjectNameError(name, f"directory '{name}' already exists")
