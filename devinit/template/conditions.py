"""Evaluation of file-inclusion and requirement ``when`` conditions.

A condition names a boolean variable and may be written three ways, all
equivalent: ``"{{ .IncludeDocker }}"``, ``".IncludeDocker"`` and
``"IncludeDocker"``.  Absent or non-boolean variables evaluate to ``False``.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Union

from devinit.template.context import RenderingContext, get_bool
from devinit.template.models import VariableValue

Scope = Union[RenderingContext, Mapping[str, VariableValue]]


def condition_key(condition: str) -> str:
    """Normalize a condition to the variable key it refers to."""
    key = condition.strip()
    if key.startswith("{{") and key.endswith("}}"):
        key = key[2:-2].strip()
    return key.removeprefix(".")


def evaluate_condition(condition: str, scope: Scope) -> bool:
    key = condition_key(condition)
    if isinstance(scope, RenderingContext):
        if key == "IncludeDocker":
            return scope.include_docker
        if key == "IncludeTests":
            return scope.include_tests
        return scope.get_bool(key)
    return get_bool(scope, key)


def all_conditions_met(conditions: Iterable[str], scope: Scope) -> bool:
    """Logical AND over *conditions*; an empty list always holds."""
    return all(evaluate_condition(condition, scope) for condition in conditions)
