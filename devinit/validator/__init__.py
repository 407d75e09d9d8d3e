"""devinit validator -- system requirement and version-constraint checks."""

from devinit.validator.checker import (
    Requirement,
    RequirementChecker,
    ValidationIssue,
    ValidationLevel,
    ValidationResult,
    extract_version,
)
from devinit.validator.versions import (
    compare_versions,
    parse_constraint,
    parse_version,
    satisfies,
)

__all__ = [
    "Requirement",
    "RequirementChecker",
    "ValidationIssue",
    "ValidationLevel",
    "ValidationResult",
    "compare_versions",
    "extract_version",
    "parse_constraint",
    "parse_version",
    "satisfies",
]
