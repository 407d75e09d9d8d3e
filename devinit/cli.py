"""devinit command-line interface.

Usage::

    devinit new api my-service --lang python --framework fastapi
    devinit new my-service --lang python --framework fastapi --dry-run
    devinit doctor --template python/fastapi
    devinit templates list
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape

from devinit import __version__
from devinit.config import Config
from devinit.errors import DevinitError
from devinit.generator import (
    GenerateOptions,
    ProjectGenerator,
    merge_variables,
    validate_project_name,
)
from devinit.template import TemplateDescriptor
from devinit.utils import (
    console,
    print_error,
    print_notice,
    print_success,
    print_summary_table,
    print_warning,
)
from devinit.validator import RequirementChecker, ValidationLevel, ValidationResult

# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devinit",
        description="Multi-language project scaffolding CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  devinit new api my-service --lang python --framework fastapi\n"
            "  devinit new my-service --lang python --framework fastapi --no-docker\n"
            "  devinit doctor --template python/fastapi\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--templates-dir", type=Path, default=None, help="Template root override")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Create a new project")
    new.add_argument("args", nargs="+", metavar="[type] name", help="Optional project type, then the name")
    new.add_argument("--lang", required=True, help="Programming language (python, nodejs, ...)")
    new.add_argument("--framework", required=True, help="Framework to use")
    new.add_argument("--docker", action=argparse.BooleanOptionalAction, default=True,
                     help="Include Docker configuration")
    new.add_argument("--database", default="none", help="Database (postgres, sqlite, none)")
    new.add_argument("--ci", default="", help="CI provider (github, gitlab, none)")
    new.add_argument("--python-version", default="3.11", help="Python version (python only)")
    new.add_argument("--tests", action=argparse.BooleanOptionalAction, default=True,
                     help="Include test setup")
    new.add_argument("--var", action="append", default=[], metavar="KEY=VALUE",
                     help="Extra template variable (repeatable)")
    new.add_argument("--output", "-o", default="", help="Output directory (default: project name)")
    new.add_argument("--dry-run", action="store_true", help="Show what would be done")
    new.add_argument("--no-validate", action="store_true", help="Skip requirement checks")
    new.add_argument("--strict", action="store_true", help="Treat version mismatches as errors")

    doctor = sub.add_parser("doctor", help="Check system requirements")
    doctor.add_argument("--template", default="", help="Check one template only")
    doctor.add_argument("--strict", action="store_true", help="Treat version mismatches as errors")

    templates = sub.add_parser("templates", help="List, show and validate templates")
    templates_sub = templates.add_subparsers(dest="templates_command", required=True)
    templates_sub.add_parser("list", help="List available templates")
    show = templates_sub.add_parser("show", help="Show template details")
    show.add_argument("name")
    templates_sub.add_parser("validate", help="Validate all templates")

    return parser


def parse_variable(raw: str) -> tuple[str, Any]:
    """Parse ``KEY=VALUE``; ``true``/``false`` become bools, integers ints."""
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        raise DevinitError(f"invalid variable {raw!r}: expected KEY=VALUE")
    lowered = value.lower()
    if lowered in ("true", "false"):
        return key, lowered == "true"
    if re.fullmatch(r"-?\d+", value, re.ASCII):
        return key, int(value)
    return key, value


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def run_new(args: argparse.Namespace, config: Config) -> int:
    project_name = args.args[-1]
    validate_project_name(project_name)

    variables: dict[str, Any] = dict(config.variables)
    variables.update(
        {
            "ProjectName": project_name,
            "PythonVersion": args.python_version,
            "IncludeDocker": args.docker,
            "Database": args.database,
            "IncludeTests": args.tests,
        }
    )
    if args.ci:
        variables["CIProvider"] = args.ci
    variables.update(parse_variable(raw) for raw in args.var)

    generator = ProjectGenerator(config.resolve_templates_dir())
    options = GenerateOptions(
        project_name=project_name,
        language=args.lang,
        framework=args.framework,
        output_dir=args.output,
        variables=variables,
        dry_run=args.dry_run,
    )

    if not args.no_validate:
        level = ValidationLevel.STRICT if args.strict else config.validation_level
        descriptor = generator.get_template(options.template_name)
        checks = check_template(descriptor, level, config, merge_variables(descriptor, variables))
        report_validation(checks)
        if checks.has_errors:
            print_error("Requirement checks failed; use --no-validate to skip them.")
            return 1

    print_notice(f"Creating {options.template_name} project: {project_name}")
    if args.dry_run:
        print_notice("(dry run - no files will be created)")

    result = generator.generate(options)

    if not args.dry_run:
        print_success(f"\n✓ Project created successfully at: {result.output_dir}")
        print_next_steps(project_name, args.lang, args.docker)
    return 0


def run_doctor(args: argparse.Namespace, config: Config) -> int:
    level = ValidationLevel.STRICT if args.strict else config.validation_level
    generator = ProjectGenerator(config.resolve_templates_dir())
    names = [args.template] if args.template else generator.list_templates()

    console.print("Checking system requirements...")
    failed = False
    for name in names:
        descriptor = generator.get_template(name)
        result = check_template(descriptor, level, config)
        console.print(f"\n[bold]{escape(name)}[/bold]")
        report_validation(result)
        failed = failed or result.has_errors

    if failed:
        return 1
    print_success("\nAll required tools are available.")
    return 0


def run_templates(args: argparse.Namespace, config: Config) -> int:
    generator = ProjectGenerator(config.resolve_templates_dir())

    if args.templates_command == "list":
        console.print("Available templates:")
        for name in generator.list_templates():
            print_notice(f"  - {name}")
        return 0

    if args.templates_command == "show":
        show_template(generator.get_template(args.name))
        return 0

    console.print("Validating templates...")
    errors = 0
    for name in generator.list_templates():
        try:
            generator.get_template(name)
        except DevinitError as exc:
            print_error(f"  ✗ {name}: {exc}")
            errors += 1
        else:
            print_success(f"  ✓ {name}")

    if errors:
        print_error(f"{errors} template(s) failed validation")
        return 1
    print_success("\nAll templates valid!")
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def check_template(
    descriptor: TemplateDescriptor,
    level: ValidationLevel,
    config: Config,
    variables: dict[str, Any] | None = None,
) -> ValidationResult:
    checker = RequirementChecker(level, timeout=config.command_timeout)
    result = checker.validate(descriptor.requirements.system, variables)
    result.extend(checker.validate_environment(descriptor.requirements.environment, variables))
    return result


def report_validation(result: ValidationResult) -> None:
    for issue in result.errors:
        print_error(f"  ✗ {issue.message}")
        if issue.install_hint:
            print_notice(f"    hint: {issue.install_hint}")
    for issue in result.warnings:
        print_warning(f"  ! {issue.message}")
        if issue.install_hint:
            print_notice(f"    hint: {issue.install_hint}")
    if not result.has_errors and not result.has_warnings:
        print_success("  ✓ all requirements met")


def show_template(descriptor: TemplateDescriptor) -> None:
    print_summary_table(
        {
            "Name": descriptor.name,
            "Version": descriptor.version,
            "Description": descriptor.description,
            "Language": descriptor.language,
            "Framework": descriptor.framework,
        },
        title="Template",
    )
    if descriptor.variables:
        print_summary_table(
            {
                key: f"({variable.type.value}) {variable.description}"
                for key, variable in descriptor.variables.items()
            },
            title="Variables",
        )


def print_next_steps(project_name: str, lang: str, docker: bool) -> None:
    console.print("\nNext steps:")
    print_notice(f"  cd {project_name}")
    if lang == "python":
        print_notice("  poetry install")
        if docker:
            print_notice("  docker compose up")
        else:
            print_notice("  poetry run uvicorn src.main:app --reload")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

_COMMANDS = {
    "new": run_new,
    "doctor": run_doctor,
    "templates": run_templates,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``devinit``."""
    args = build_parser().parse_args(argv)
    if args.no_color:
        console.no_color = True

    try:
        config = Config.from_env(Config.load(args.config))
        if args.templates_dir is not None:
            config = config.model_copy(update={"templates_dir": args.templates_dir})
        return _COMMANDS[args.command](args, config)
    except DevinitError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
