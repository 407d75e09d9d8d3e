"""Project generation orchestrator.

Loads a template bundle, merges variables, decides per file whether it is
included, renders or copies it into the output directory, and finally writes
the ``.devinit.yaml`` generation metadata.  A dry run walks through exactly
the same decisions without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import BaseModel, Field

from devinit.errors import DevinitError, FileOperationError, GenerationError
from devinit.template.conditions import all_conditions_met
from devinit.template.context import RenderingContext
from devinit.template.loader import TemplateLoader
from devinit.template.models import FileSpec, TemplateDescriptor, VariableValue
from devinit.template.renderer import TemplateRenderer
from devinit.utils import print_notice

METADATA_FILENAME = ".devinit.yaml"
METADATA_SCHEMA_VERSION = "1.0"

Reporter = Callable[[str], None]


# ---------------------------------------------------------------------------
# Options and results
# ---------------------------------------------------------------------------


class GenerateOptions(BaseModel):
    """Resolved inputs for one :meth:`ProjectGenerator.generate` call."""

    project_name: str = Field(..., description="Already-validated project name")
    language: str
    framework: str
    output_dir: str = Field(default="", description="Defaults to the project name")
    variables: dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = False

    @property
    def template_name(self) -> str:
        return f"{self.language}/{self.framework}"

    def resolved_output_dir(self) -> str:
        return self.output_dir or self.project_name


@dataclass
class FileAction:
    """What happened (or would happen) to one included file."""

    action: str  # "render" | "copy"
    source: str
    destination: Path


@dataclass
class GenerationResult:
    template: str
    output_dir: Path
    dry_run: bool
    actions: list[FileAction] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    metadata_path: Path | None = None

    @property
    def files(self) -> list[Path]:
        """Destinations of every included file, in descriptor order."""
        return [action.destination for action in self.actions]


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generates projects from the template bundles under *templates_dir*."""

    def __init__(
        self,
        templates_dir: str | Path,
        reporter: Reporter | None = None,
    ) -> None:
        self.loader = TemplateLoader(templates_dir)
        self.renderer = TemplateRenderer()
        self.reporter: Reporter = reporter or print_notice

    # -- Public API --------------------------------------------------------

    def generate(self, options: GenerateOptions) -> GenerationResult:
        """Generate a project, or simulate it when ``options.dry_run`` is set.

        Raises:
            TemplateLoadError: The bundle cannot be loaded.
            FileOperationError: The output directory or metadata file cannot
                be written.
            GenerationError: Rendering or copying one file failed; files
                written before it are left in place.
        """
        template_name = options.template_name
        descriptor = self.loader.load(template_name)

        variables = merge_variables(descriptor, options.variables)
        output_dir = options.resolved_output_dir()
        context = RenderingContext(
            project_name=options.project_name,
            output_dir=output_dir,
            variables=variables,
            template=descriptor,
        )
        result = GenerationResult(
            template=template_name,
            output_dir=Path(output_dir),
            dry_run=options.dry_run,
        )

        if not options.dry_run:
            try:
                Path(output_dir).mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise FileOperationError(
                    output_dir, f"failed to create project directory ({exc.strerror or exc})"
                ) from exc

        files_dir = self.loader.files_dir(descriptor)
        for spec in descriptor.files:
            if not all_conditions_met(spec.conditions, context):
                result.skipped.append(spec.destination)
                if options.dry_run:
                    self.reporter(f"Skipped: {spec.destination} (conditions not met)")
                continue

            action = self._generate_file(files_dir, spec, context, options.dry_run)
            result.actions.append(action)

        if not options.dry_run:
            result.metadata_path = write_metadata(context, template_name, descriptor)

        return result

    def list_templates(self) -> list[str]:
        return self.loader.list()

    def get_template(self, name: str) -> TemplateDescriptor:
        return self.loader.load(name)

    # -- Per-file generation -----------------------------------------------

    def _generate_file(
        self,
        files_dir: Path,
        spec: FileSpec,
        context: RenderingContext,
        dry_run: bool,
    ) -> FileAction:
        source_path = files_dir / spec.source
        output_root = Path(context.output_dir)

        if self.renderer.should_render(spec.source):
            destination = output_root / self.renderer.output_filename(spec.destination)
            action = FileAction("render", spec.source, destination)
            if dry_run:
                self.reporter(f"Would render: {spec.source} -> {destination}")
                return action
            try:
                self.renderer.render_to_file(source_path, destination, context, spec.mode)
            except DevinitError as exc:
                raise GenerationError(destination, str(exc)) from exc
        else:
            destination = output_root / spec.destination
            action = FileAction("copy", spec.source, destination)
            if dry_run:
                self.reporter(f"Would copy: {spec.source} -> {destination}")
                return action
            try:
                self.renderer.copy_file(source_path, destination, spec.mode)
            except DevinitError as exc:
                raise GenerationError(destination, str(exc)) from exc

        self.reporter(f"Created: {destination}")
        return action


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def merge_variables(
    descriptor: TemplateDescriptor,
    overrides: Mapping[str, VariableValue],
) -> dict[str, VariableValue]:
    """Declared defaults overlaid with *overrides*; undeclared keys pass through."""
    variables = descriptor.default_variables()
    variables.update(overrides)
    return variables


def write_metadata(
    context: RenderingContext,
    template_name: str,
    descriptor: TemplateDescriptor,
) -> Path:
    """Write ``.devinit.yaml`` at the output root and return its path."""
    metadata = {
        "schema_version": METADATA_SCHEMA_VERSION,
        "template": {
            "name": template_name,
            "version": descriptor.version,
        },
        "variables": {key: _plain(value) for key, value in context.variables.items()},
    }
    path = Path(context.output_dir) / METADATA_FILENAME
    try:
        path.write_text(
            yaml.safe_dump(metadata, sort_keys=True, default_flow_style=False),
            encoding="utf-8",
        )
    except OSError as exc:
        raise FileOperationError(path, f"failed to create metadata file ({exc.strerror or exc})") from exc
    return path


def _plain(value: Any) -> Any:
    """Scalars stay native YAML scalars; anything else uses ``str()``."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return str(value)
