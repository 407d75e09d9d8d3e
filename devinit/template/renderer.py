"""Jinja2 rendering of template bundle files.

Files whose name ends in ``.tmpl`` are rendered with Jinja2 against a
:class:`~devinit.template.context.RenderingContext`; every other file is
copied byte for byte.  Both paths create missing parent directories and apply
the requested permission bits.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2
from jinja2 import Environment, StrictUndefined

from devinit.errors import FileOperationError, TemplateExecutionError, TemplateSyntaxError
from devinit.template.casing import to_camel, to_kebab, to_pascal, to_snake
from devinit.template.context import RenderingContext
from devinit.template.models import DEFAULT_FILE_MODE

TEMPLATE_SUFFIX = ".tmpl"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders or copies bundle files into the output tree.

    Available in templates besides the Jinja2 built-ins: the ``snake``,
    ``camel``, ``pascal``, ``kebab``, ``split`` and ``contains`` filters, and
    the ``eq``, ``ne`` and ``contains`` functions.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["snake"] = to_snake
        self.env.filters["camel"] = to_camel
        self.env.filters["pascal"] = to_pascal
        self.env.filters["kebab"] = to_kebab
        self.env.filters["split"] = _split_filter
        self.env.filters["contains"] = _contains
        self.env.tests["contains"] = _contains
        self.env.globals["contains"] = _contains
        self.env.globals["eq"] = _eq
        self.env.globals["ne"] = _ne

    # -- Filenames ---------------------------------------------------------

    @staticmethod
    def should_render(filename: str) -> bool:
        return filename.endswith(TEMPLATE_SUFFIX)

    @staticmethod
    def output_filename(filename: str) -> str:
        """Strip one ``.tmpl`` suffix, leaving other names unchanged."""
        if filename.endswith(TEMPLATE_SUFFIX):
            return filename[: -len(TEMPLATE_SUFFIX)]
        return filename

    # -- Rendering ---------------------------------------------------------

    def render(self, source_path: str | Path, context: RenderingContext) -> str:
        """Render a template file and return the resulting text.

        Raises:
            FileOperationError: The source cannot be read.
            TemplateSyntaxError: The source is not valid template syntax.
            TemplateExecutionError: A referenced name is undefined or has the
                wrong type for the operation.
        """
        source = Path(source_path)
        try:
            content = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileOperationError(source, f"failed to read template ({exc.strerror or exc})") from exc
        return self.render_string(content, context, name=str(source))

    def render_string(self, content: str, context: RenderingContext, name: str = "<string>") -> str:
        """Render inline template text against *context*."""
        try:
            template = self.env.from_string(content)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(name, exc.message or str(exc), exc.lineno) from exc

        try:
            return template.render(**context.as_template_vars())
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(name, exc.message or str(exc), exc.lineno) from exc
        except Exception as exc:
            raise TemplateExecutionError(name, f"{type(exc).__name__}: {exc}") from exc

    # -- File output -------------------------------------------------------

    def render_to_file(
        self,
        source_path: str | Path,
        output_path: str | Path,
        context: RenderingContext,
        mode: int = DEFAULT_FILE_MODE,
    ) -> Path:
        """Render a template and write the result to *output_path*."""
        content = self.render(source_path, context)
        out = Path(output_path)
        _write_file(out, content.encode("utf-8"), mode)
        return out

    def copy_file(
        self,
        source_path: str | Path,
        output_path: str | Path,
        mode: int = DEFAULT_FILE_MODE,
    ) -> Path:
        """Copy a static file verbatim to *output_path*."""
        source = Path(source_path)
        try:
            content = source.read_bytes()
        except OSError as exc:
            raise FileOperationError(source, f"failed to read file ({exc.strerror or exc})") from exc
        out = Path(output_path)
        _write_file(out, content, mode)
        return out


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------


def _split_filter(value: str, sep: str | None = None) -> list[str]:
    return value.split(sep)


def _contains(value: Any, item: Any) -> bool:
    """``value`` contains ``item`` (substring test for strings)."""
    return item in value


def _eq(a: Any, b: Any) -> bool:
    return a == b


def _ne(a: Any, b: Any) -> bool:
    return a != b


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: bytes, mode: int) -> None:
    """Create parent dirs, write *content* and apply *mode*."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        path.chmod(mode)
    except OSError as exc:
        raise FileOperationError(path, f"failed to write file ({exc.strerror or exc})") from exc
