"""devinit configuration.

Persisted, typed global settings.  Default variable values stored here are fed
into generation exactly like command-line variables, just with lower
precedence.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from devinit.errors import ConfigError
from devinit.validator.checker import ValidationLevel

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"


def default_config_path() -> Path:
    """``~/.devinit/config.json``."""
    return Path.home() / ".devinit" / "config.json"


class Config(BaseModel):
    """Global devinit configuration."""

    templates_dir: Path | None = Field(
        default=None, description="Template root; auto-detected when unset"
    )
    validation_level: ValidationLevel = Field(default=ValidationLevel.BASIC)
    variables: dict[str, Any] = Field(
        default_factory=dict, description="Default template variable values"
    )
    command_timeout: float | None = Field(
        default=None, gt=0, description="Per-probe timeout in seconds for requirement checks"
    )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def resolve_templates_dir(self) -> Path:
        """The configured root, else ``./templates`` if present, else the bundled one."""
        if self.templates_dir is not None:
            return self.templates_dir
        local = Path("templates")
        if local.is_dir():
            return local
        return BUNDLED_TEMPLATES_DIR

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``~/.devinit/config.json``.

        Returns:
            The path where the file was written.
        """
        target = path or default_config_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load a saved configuration; a missing file yields the defaults.

        Raises:
            ConfigError: The file is unreadable or not a valid configuration.
        """
        source = Path(path) if path is not None else default_config_path()
        if not source.exists():
            return cls()
        try:
            return cls.model_validate_json(source.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(str(source), exc.strerror or str(exc)) from exc
        except ValidationError as exc:
            raise ConfigError(str(source), _first_error(exc)) from exc

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Overlay environment variables on *base* (or on the defaults).

        Recognised variables (all optional):
            DEVINIT_TEMPLATES_DIR, DEVINIT_VALIDATION_LEVEL,
            DEVINIT_COMMAND_TIMEOUT.
        """
        overrides: dict[str, Any] = {}
        if os.environ.get("DEVINIT_TEMPLATES_DIR"):
            overrides["templates_dir"] = Path(os.environ["DEVINIT_TEMPLATES_DIR"])
        if os.environ.get("DEVINIT_VALIDATION_LEVEL"):
            overrides["validation_level"] = os.environ["DEVINIT_VALIDATION_LEVEL"].lower()
        if os.environ.get("DEVINIT_COMMAND_TIMEOUT"):
            overrides["command_timeout"] = os.environ["DEVINIT_COMMAND_TIMEOUT"]

        data = (base or cls()).model_dump()
        data.update(overrides)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError("environment", _first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
