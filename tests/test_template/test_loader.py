"""Tests for template loading (devinit.template.loader) and the descriptor model.

Tests cover:
- Loading a valid bundle and the parsed descriptor fields
- NotFound / malformed metadata / invalid template failures
- Listing bundles under a root
- FileSpec permission parsing
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from devinit.errors import (
    InvalidTemplateError,
    MalformedMetadataError,
    TemplateLoadError,
    TemplateNotFoundError,
)
from devinit.template.loader import TemplateLoader
from devinit.template.models import FileSpec, TemplateDescriptor, VariableType

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestLoad:
    def test_loads_descriptor(self, templates_root: Path, demo_bundle: Path):
        descriptor = TemplateLoader(templates_root).load("python/demo")
        assert descriptor.name == "Demo"
        assert descriptor.version == "1.2.0"
        assert descriptor.language == "python"
        assert descriptor.framework == "demo"
        assert descriptor.path == demo_bundle
        assert [f.source for f in descriptor.files] == ["README.md.tmpl", "Dockerfile"]
        assert descriptor.files[1].conditions == ["{{ .IncludeDocker }}"]
        assert descriptor.variables["IncludeDocker"].type is VariableType.BOOLEAN

    def test_files_dir(self, templates_root: Path, demo_bundle: Path):
        loader = TemplateLoader(templates_root)
        descriptor = loader.load("python/demo")
        assert loader.files_dir(descriptor) == demo_bundle / "files"

    def test_missing_bundle(self, templates_root: Path):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            TemplateLoader(templates_root).load("python/nope")
        assert "python/nope" in str(exc_info.value)
        assert isinstance(exc_info.value, TemplateLoadError)

    def test_missing_metadata_file(self, templates_root: Path):
        (templates_root / "python" / "empty").mkdir(parents=True)
        with pytest.raises(MalformedMetadataError):
            TemplateLoader(templates_root).load("python/empty")

    def test_unparsable_yaml(self, templates_root: Path, make_bundle):
        make_bundle("python/bad", None, raw_metadata="version: [unclosed\n")
        with pytest.raises(MalformedMetadataError):
            TemplateLoader(templates_root).load("python/bad")

    def test_non_mapping_document(self, templates_root: Path, make_bundle):
        make_bundle("python/list", None, raw_metadata="- a\n- b\n")
        with pytest.raises(MalformedMetadataError):
            TemplateLoader(templates_root).load("python/list")

    def test_wrong_field_type(self, templates_root: Path, make_bundle):
        make_bundle(
            "python/typed",
            {"version": "1", "name": "x", "language": "python", "files": "not-a-list"},
        )
        with pytest.raises(MalformedMetadataError):
            TemplateLoader(templates_root).load("python/typed")

    @pytest.mark.parametrize("missing", ["version", "name", "language"])
    def test_required_fields(self, templates_root: Path, make_bundle, missing: str):
        descriptor: dict[str, Any] = {"version": "1.0", "name": "x", "language": "python"}
        del descriptor[missing]
        make_bundle("python/incomplete", descriptor)
        with pytest.raises(InvalidTemplateError) as exc_info:
            TemplateLoader(templates_root).load("python/incomplete")
        assert f"{missing} is required" in str(exc_info.value)

    def test_missing_source_file(self, templates_root: Path, make_bundle):
        make_bundle(
            "python/missing",
            {
                "version": "1.0",
                "name": "x",
                "language": "python",
                "files": [{"src": "ghost.txt", "dest": "ghost.txt"}],
            },
        )
        with pytest.raises(InvalidTemplateError) as exc_info:
            TemplateLoader(templates_root).load("python/missing")
        assert "ghost.txt" in str(exc_info.value)

    def test_invalid_permissions(self, templates_root: Path, make_bundle):
        make_bundle(
            "python/perm",
            {
                "version": "1.0",
                "name": "x",
                "language": "python",
                "files": [{"src": "a.sh", "dest": "a.sh", "permissions": "rwxr-xr-x"}],
            },
            {"a.sh": "echo hi\n"},
        )
        with pytest.raises(InvalidTemplateError):
            TemplateLoader(templates_root).load("python/perm")

    @pytest.mark.parametrize(
        "literal,expected",
        [("755", 0o755), ("0755", 0o755), ("0644", 0o644), ("\"0600\"", 0o600)],
    )
    def test_unquoted_permissions(self, templates_root: Path, make_bundle, literal: str, expected: int):
        raw = (
            "version: \"1.0\"\n"
            "name: perm\n"
            "language: python\n"
            "files:\n"
            "  - src: a.sh\n"
            "    dest: a.sh\n"
            f"    permissions: {literal}\n"
        )
        make_bundle("python/perm", None, {"a.sh": "echo hi\n"}, raw_metadata=raw)
        descriptor = TemplateLoader(templates_root).load("python/perm")
        assert descriptor.files[0].mode == expected

    def test_signed_permissions_rejected(self, templates_root: Path, make_bundle):
        make_bundle(
            "python/perm",
            {
                "version": "1.0",
                "name": "x",
                "language": "python",
                "files": [{"src": "a.sh", "dest": "a.sh", "permissions": "-755"}],
            },
            {"a.sh": "echo hi\n"},
        )
        with pytest.raises(InvalidTemplateError, match="-755"):
            TemplateLoader(templates_root).load("python/perm")

    def test_unknown_keys_and_nulls(self, templates_root: Path, make_bundle):
        make_bundle(
            "python/sparse",
            None,
            raw_metadata=(
                "version: 1.0\n"
                "name: Sparse\n"
                "language: python\n"
                "variables:\n"
                "files:\n"
                "hooks:\n"
                "something_new: true\n"
            ),
        )
        descriptor = TemplateLoader(templates_root).load("python/sparse")
        assert descriptor.version == "1.0"
        assert descriptor.files == []
        assert descriptor.variables == {}
        assert descriptor.hooks.pre_generate == []
        assert descriptor.healthcheck is None


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


class TestList:
    def test_lists_sorted(self, templates_root: Path, make_bundle):
        minimal = {"version": "1", "name": "x", "language": "l"}
        make_bundle("python/fastapi", minimal)
        make_bundle("nodejs/express", minimal)
        make_bundle("python/django", minimal)
        (templates_root / "python" / "not-a-template").mkdir()
        assert TemplateLoader(templates_root).list() == [
            "nodejs/express",
            "python/django",
            "python/fastapi",
        ]

    def test_missing_root(self, tmp_path: Path):
        assert TemplateLoader(tmp_path / "absent").list() == []


# ---------------------------------------------------------------------------
# Descriptor model
# ---------------------------------------------------------------------------


class TestFileSpecMode:
    @pytest.mark.parametrize(
        "permissions,expected",
        [("", 0o644), ("0755", 0o755), ("755", 0o755), ("0o600", 0o600)],
    )
    def test_octal_strings(self, permissions: str, expected: int):
        spec = FileSpec(source="a", destination="a", permissions=permissions)
        assert spec.mode == expected

    def test_integer_read_as_written(self):
        spec = FileSpec.model_validate({"src": "a", "dest": "a", "permissions": 755})
        assert spec.permissions == "755"
        assert spec.mode == 0o755

    @pytest.mark.parametrize(
        "permissions", ["abc", "-755", "+755", "7_55", "0o-7", "0899", "17777", " 0x1ed"]
    )
    def test_invalid(self, permissions: str):
        with pytest.raises(ValueError):
            FileSpec(source="a", destination="a", permissions=permissions).mode


class TestDescriptorDefaults:
    def test_default_variables_skip_missing_defaults(self):
        descriptor = TemplateDescriptor.model_validate(
            {
                "variables": {
                    "A": {"default": "x"},
                    "B": {"type": "boolean", "default": False},
                    "C": {"type": "string"},
                }
            }
        )
        assert descriptor.default_variables() == {"A": "x", "B": False}

    def test_requirements_aliases(self):
        descriptor = TemplateDescriptor.model_validate(
            {
                "requirements": {
                    "system": [{"command": "docker", "required": True, "install_hint": "get it"}],
                    "environment": [{"var": "API_KEY", "required": True}],
                }
            }
        )
        assert descriptor.requirements.system[0].install_hint == "get it"
        assert descriptor.requirements.environment[0].variable == "API_KEY"
