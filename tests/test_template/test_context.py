"""Tests for RenderingContext and condition evaluation.

Tests cover:
- Derived casing variants and convenience fields
- Typed accessors defaulting to zero values
- Condition normalization across the three accepted surface forms
"""

from __future__ import annotations

import dataclasses

import pytest

from devinit.template.conditions import all_conditions_met, condition_key, evaluate_condition
from devinit.template.context import RenderingContext

pytestmark = pytest.mark.unit


def _context(**variables) -> RenderingContext:
    return RenderingContext(project_name="my-api-project", output_dir="out", variables=variables)


class TestRenderingContext:
    def test_casing_variants(self):
        ctx = _context()
        assert ctx.project_name_snake == "my_api_project"
        assert ctx.project_name_camel == "myApiProject"
        assert ctx.project_name_pascal == "MyApiProject"
        assert ctx.project_name_kebab == "my-api-project"

    def test_convenience_fields(self):
        ctx = _context(
            PythonVersion="3.12",
            IncludeDocker=True,
            Database="postgres",
            IncludeTests=True,
            CIProvider="github",
        )
        assert ctx.python_version == "3.12"
        assert ctx.include_docker is True
        assert ctx.database == "postgres"
        assert ctx.include_tests is True
        assert ctx.ci_provider == "github"

    def test_convenience_fields_ignore_wrong_types(self):
        ctx = _context(IncludeDocker="yes", PythonVersion=3.12)
        assert ctx.include_docker is False
        assert ctx.python_version == ""

    def test_is_immutable(self):
        ctx = _context()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.include_docker = True  # type: ignore[misc]

    def test_typed_accessors(self):
        ctx = _context(name="x", flag=True, count=3, toggle=1)
        assert ctx.get_string("name") == "x"
        assert ctx.get_string("flag") == ""
        assert ctx.get_bool("flag") is True
        assert ctx.get_bool("toggle") is False
        assert ctx.get_int("count") == 3
        assert ctx.get_int("flag") == 0
        assert ctx.get_int("missing") == 0

    def test_template_vars(self):
        ctx = _context(Database="sqlite", Extra="value", ProjectName="shadowed")
        scope = ctx.as_template_vars()
        assert scope["ProjectName"] == "my-api-project"
        assert scope["Extra"] == "value"
        assert scope["Variables"]["Extra"] == "value"
        assert scope["Database"] == "sqlite"


class TestConditions:
    @pytest.mark.parametrize(
        "condition",
        ["{{ .IncludeDocker }}", "{{.IncludeDocker}}", ".IncludeDocker", "IncludeDocker", "  IncludeDocker "],
    )
    def test_surface_forms_normalize(self, condition: str):
        assert condition_key(condition) == "IncludeDocker"

    @pytest.mark.parametrize("value", [True, False])
    def test_surface_forms_agree(self, value: bool):
        ctx = _context(IncludeDocker=value)
        results = {
            evaluate_condition(form, ctx)
            for form in ("{{ .IncludeDocker }}", ".IncludeDocker", "IncludeDocker")
        }
        assert results == {value}

    def test_generic_variable(self):
        ctx = _context(UseRedis=True)
        assert evaluate_condition("{{ .UseRedis }}", ctx) is True

    def test_absent_or_non_bool_is_false(self):
        ctx = _context(UseRedis="true")
        assert evaluate_condition("UseRedis", ctx) is False
        assert evaluate_condition("Missing", ctx) is False

    def test_plain_mapping_scope(self):
        assert evaluate_condition(".IncludeTests", {"IncludeTests": True}) is True
        assert evaluate_condition(".IncludeTests", {}) is False

    def test_all_conditions_met_is_and(self):
        ctx = _context(A=True, B=False)
        assert all_conditions_met([], ctx) is True
        assert all_conditions_met(["A"], ctx) is True
        assert all_conditions_met(["A", "B"], ctx) is False
