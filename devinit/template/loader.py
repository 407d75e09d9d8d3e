"""Filesystem-backed loading of template bundles.

A bundle is a directory holding ``template.yaml`` and a ``files/`` payload
directory.  Bundles are addressed by their path relative to the template
root, e.g. ``python/fastapi``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from devinit.errors import (
    InvalidTemplateError,
    MalformedMetadataError,
    TemplateNotFoundError,
)
from devinit.template.models import TemplateDescriptor

METADATA_FILENAME = "template.yaml"
FILES_DIRNAME = "files"

_OCTAL_LITERAL = re.compile(r"0[0-7]+")


class _DescriptorLoader(yaml.SafeLoader):
    """SafeLoader that keeps ``0755``-style octal literals as their text."""


def _construct_int(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> int | str:
    text = loader.construct_scalar(node)
    if _OCTAL_LITERAL.fullmatch(text):
        return text
    return loader.construct_yaml_int(node)


_DescriptorLoader.add_constructor("tag:yaml.org,2002:int", _construct_int)


class TemplateLoader:
    """Loads and validates template descriptors from a template root."""

    def __init__(self, templates_dir: str | Path) -> None:
        self.templates_dir = Path(templates_dir)

    def load(self, name: str) -> TemplateDescriptor:
        """Load the bundle ``name`` (``<language>/<framework>``).

        Raises:
            TemplateNotFoundError: The bundle directory does not exist.
            MalformedMetadataError: ``template.yaml`` is unreadable or invalid.
            InvalidTemplateError: Required fields or payload files are missing.
        """
        template_path = self.templates_dir / name
        if not template_path.is_dir():
            raise TemplateNotFoundError(name)

        metadata_path = template_path / METADATA_FILENAME
        try:
            raw = metadata_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MalformedMetadataError(name, f"cannot read {METADATA_FILENAME}: {exc}") from exc

        try:
            data = yaml.load(raw, Loader=_DescriptorLoader)
        except yaml.YAMLError as exc:
            raise MalformedMetadataError(name, str(exc)) from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise MalformedMetadataError(name, "top-level document must be a mapping")

        try:
            descriptor = TemplateDescriptor.model_validate(data)
        except ValidationError as exc:
            raise MalformedMetadataError(name, str(exc)) from exc

        descriptor.path = template_path
        self._validate(name, descriptor)
        return descriptor

    def list(self) -> list[str]:
        """Return every bundle under the root, sorted, as POSIX-style names."""
        if not self.templates_dir.is_dir():
            return []

        templates: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.templates_dir):
            dirnames.sort()
            if METADATA_FILENAME in filenames:
                rel = Path(dirpath).relative_to(self.templates_dir)
                templates.append(rel.as_posix())
        return sorted(templates)

    def files_dir(self, descriptor: TemplateDescriptor) -> Path:
        """Directory holding the bundle's payload files."""
        return descriptor.path / FILES_DIRNAME

    # -- Validation --------------------------------------------------------

    def _validate(self, name: str, descriptor: TemplateDescriptor) -> None:
        for field in ("version", "name", "language"):
            if not getattr(descriptor, field):
                raise InvalidTemplateError(name, f"{field} is required")

        files_dir = self.files_dir(descriptor)
        for spec in descriptor.files:
            if not (files_dir / spec.source).is_file():
                raise InvalidTemplateError(name, f"file not found: {spec.source}")
            try:
                spec.mode
            except ValueError as exc:
                raise InvalidTemplateError(
                    name, f"invalid permissions {spec.permissions!r} for {spec.source}"
                ) from exc
