"""System requirement checks for template bundles.

Detects whether the commands a template needs are on ``PATH``, asks them for
their version, and matches that version against the declared constraint.
A missing command or an undetectable version is a reportable outcome, never
an exception.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from devinit.errors import InvalidVersionError
from devinit.template.conditions import evaluate_condition
from devinit.template.models import (
    EnvironmentRequirement,
    SystemRequirement,
    VariableValue,
)
from devinit.validator.versions import parse_constraint, satisfies

# Tried in order until one prints something version-like.
VERSION_FLAGS: tuple[str, ...] = ("--version", "-version", "-v", "version")

_VERSION_PATTERNS = [
    re.compile(r"v?(\d+\.\d+\.\d+)"),
    re.compile(r"v?(\d+\.\d+)"),
    re.compile(r"version\s+v?(\d+\.\d+\.\d+)", re.IGNORECASE),
]


class ValidationLevel(str, Enum):
    """How strictly requirements are enforced."""

    NONE = "none"  # skip all checks
    BASIC = "basic"  # version mismatches are warnings
    STRICT = "strict"  # version mismatches are errors


@dataclass
class ValidationIssue:
    command: str
    message: str
    install_hint: str = ""

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


@dataclass
class Requirement:
    """A command requirement, decoupled from the descriptor schema."""

    command: str
    version: str = ""
    required: bool = False
    when: str = ""
    install_hint: str = ""

    @classmethod
    def from_template(cls, requirement: SystemRequirement) -> "Requirement":
        return cls(
            command=requirement.command,
            version=requirement.version,
            required=requirement.required,
            when=requirement.when,
            install_hint=requirement.install_hint,
        )


def extract_version(output: str) -> str:
    """Return the first version-looking substring of *output*, or ``""``."""
    for pattern in _VERSION_PATTERNS:
        match = pattern.search(output)
        if match:
            return match.group(1)
    return ""


# ---------------------------------------------------------------------------
# RequirementChecker
# ---------------------------------------------------------------------------


class RequirementChecker:
    """Checks command and environment requirements at a given strictness.

    Args:
        level: Validation strictness.
        timeout: Optional per-invocation timeout in seconds for the version
            probes. ``None`` waits indefinitely.
    """

    def __init__(
        self,
        level: ValidationLevel = ValidationLevel.BASIC,
        timeout: float | None = None,
    ) -> None:
        self.level = ValidationLevel(level)
        self.timeout = timeout

    # -- Probing -----------------------------------------------------------

    def check_command(self, name: str) -> tuple[bool, str]:
        """Return ``(installed, version)``; version is ``""`` if undetectable."""
        executable = shutil.which(name)
        if executable is None:
            return False, ""
        return True, self._command_version(executable)

    def _command_version(self, executable: str) -> str:
        for flag in VERSION_FLAGS:
            try:
                proc = subprocess.run(
                    [executable, flag],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                    timeout=self.timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired):
                continue
            if proc.returncode != 0:
                continue
            version = extract_version(proc.stdout.decode("utf-8", errors="replace"))
            if version:
                return version
        return ""

    # -- Validation --------------------------------------------------------

    def validate(
        self,
        requirements: Iterable[Requirement | SystemRequirement],
        variables: Mapping[str, VariableValue] | None = None,
    ) -> ValidationResult:
        """Check every requirement and sort the findings into errors/warnings.

        When *variables* is ``None`` every requirement is checked regardless
        of its ``when`` condition; otherwise requirements whose condition is
        false are skipped.
        """
        result = ValidationResult()
        if self.level is ValidationLevel.NONE:
            return result

        for item in requirements:
            req = item if isinstance(item, Requirement) else Requirement.from_template(item)
            if not _enabled(req.when, variables):
                continue

            installed, version = self.check_command(req.command)
            if not installed:
                issue = ValidationIssue(req.command, f"{req.command} not found", req.install_hint)
                (result.errors if req.required else result.warnings).append(issue)
                continue

            if not req.version:
                continue

            try:
                parse_constraint(req.version)
            except InvalidVersionError as exc:
                result.errors.append(
                    ValidationIssue(
                        req.command,
                        f"invalid version constraint for {req.command}: {exc}",
                        req.install_hint,
                    )
                )
                continue

            if not version:
                continue

            if not satisfies(version, req.version):
                issue = ValidationIssue(
                    req.command,
                    f"{req.command} version {version} does not match requirement {req.version}",
                    req.install_hint,
                )
                if self.level is ValidationLevel.STRICT:
                    result.errors.append(issue)
                else:
                    result.warnings.append(issue)

        return result

    def validate_environment(
        self,
        requirements: Iterable[EnvironmentRequirement],
        variables: Mapping[str, VariableValue] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ValidationResult:
        """Check that required environment variables are set and non-empty."""
        result = ValidationResult()
        if self.level is ValidationLevel.NONE:
            return result

        env = os.environ if environ is None else environ
        for req in requirements:
            if not _enabled(req.when, variables):
                continue
            if env.get(req.variable):
                continue
            issue = ValidationIssue(req.variable, f"environment variable {req.variable} is not set")
            (result.errors if req.required else result.warnings).append(issue)
        return result


def _enabled(when: str, variables: Mapping[str, VariableValue] | None) -> bool:
    if variables is None or not when.strip():
        return True
    return evaluate_condition(when, variables)
