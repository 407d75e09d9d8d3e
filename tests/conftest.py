"""Shared pytest fixtures for the devinit test suite.

Provides reusable fixtures for:
- Building template bundles on disk from a descriptor dict
- A two-file demo bundle (one rendered file, one conditional static file)
- The bundled template root shipped with the package
- A notice collector standing in for the console reporter
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from devinit.config import BUNDLED_TEMPLATES_DIR


# ---------------------------------------------------------------------------
# Template bundles
# ---------------------------------------------------------------------------


BundleFactory = Callable[..., Path]


@pytest.fixture
def templates_root(tmp_path: Path) -> Path:
    """Empty template root directory."""
    root = tmp_path / "templates"
    root.mkdir()
    return root


@pytest.fixture
def make_bundle(templates_root: Path) -> BundleFactory:
    """Factory writing ``<root>/<name>/template.yaml`` plus payload files.

    Usage::

        def test_something(make_bundle):
            bundle = make_bundle("python/demo", descriptor, {"a.txt": "hi"})
    """

    def factory(
        name: str,
        descriptor: dict[str, Any] | None,
        files: dict[str, str | bytes] | None = None,
        raw_metadata: str | None = None,
    ) -> Path:
        bundle = templates_root / name
        (bundle / "files").mkdir(parents=True, exist_ok=True)
        if raw_metadata is not None:
            (bundle / "template.yaml").write_text(raw_metadata, encoding="utf-8")
        elif descriptor is not None:
            (bundle / "template.yaml").write_text(yaml.safe_dump(descriptor), encoding="utf-8")
        for rel, content in (files or {}).items():
            path = bundle / "files" / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return bundle

    return factory


@pytest.fixture
def demo_descriptor() -> dict[str, Any]:
    """Descriptor with one always-rendered file and one Docker-only static file."""
    return {
        "version": "1.2.0",
        "name": "Demo",
        "description": "Demo bundle",
        "language": "python",
        "framework": "demo",
        "variables": {
            "IncludeDocker": {"type": "boolean", "default": False},
            "Database": {"type": "choice", "default": "none", "choices": ["none", "postgres"]},
            "PythonVersion": {"type": "string", "default": "3.11"},
            "NoDefault": {"type": "string"},
        },
        "files": [
            {"src": "README.md.tmpl", "dest": "README.md.tmpl"},
            {"src": "Dockerfile", "dest": "Dockerfile", "conditions": ["{{ .IncludeDocker }}"]},
        ],
    }


@pytest.fixture
def demo_bundle(make_bundle: BundleFactory, demo_descriptor: dict[str, Any]) -> Path:
    return make_bundle(
        "python/demo",
        demo_descriptor,
        {
            "README.md.tmpl": "# {{ ProjectNamePascal }}\npython {{ PythonVersion }}\n",
            "Dockerfile": "FROM python:3.11-slim\n",
        },
    )


@pytest.fixture
def bundled_templates_dir() -> Path:
    """Template root shipped inside the package."""
    assert BUNDLED_TEMPLATES_DIR.is_dir(), f"Bundled templates missing at {BUNDLED_TEMPLATES_DIR}"
    return BUNDLED_TEMPLATES_DIR


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


@pytest.fixture
def notices() -> list[str]:
    """List that collects generator notices when passed as ``notices.append``."""
    return []
