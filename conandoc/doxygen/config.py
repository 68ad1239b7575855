"""Renders the Doxyfile for a documentation run."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Mapping

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)
from jinja2 import TemplateError as JinjaTemplateError

from ..errors import TemplateError
from ..logging import get_logger
from ..models import OutputConfig, PackageRef, RenderedDoxyfile, SourceSet

DEFAULT_TEMPLATE = Path(__file__).resolve().parent.parent / "templates" / "Doxyfile.j2"
DOXYFILE_NAME = "Doxyfile"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "/").replace('"', '\\"')
    return f'"{escaped}"'


def format_doxygen_list(paths: Iterable[object]) -> str:
    """Render paths as a quoted Doxyfile list with line continuations."""
    quoted = [_quote(str(path)) for path in paths]
    return " \\\n                         ".join(quoted)


class ConfigGenerator:
    """Fills the Doxyfile template with the project, sources and output location."""

    def __init__(
        self,
        template_path: Path | None = None,
        *,
        html_output: str = ".",
        settings: Mapping[str, str] | None = None,
    ) -> None:
        self.template_path = Path(template_path) if template_path else DEFAULT_TEMPLATE
        self.html_output = html_output
        self.settings: Dict[str, str] = dict(settings or {})
        self.logger = get_logger("doxygen.config")
        self._env: Environment | None = None

    def render(self, package: PackageRef, sources: SourceSet, output: OutputConfig) -> str:
        """Return the Doxyfile text. Identical inputs give identical output."""
        template = self._load_template()
        try:
            return template.render(
                name=package.name,
                version=package.version,
                sources=[str(path) for path in sources.paths],
                output=str(output.output_dir).replace("\\", "/"),
                html_output=self.html_output,
                settings=sorted(self.settings.items()),
            )
        except UndefinedError as exc:
            raise TemplateError(
                f"Template {self.template_path} references an unknown value: {exc}"
            ) from exc
        except TemplateNotFound as exc:
            raise TemplateError(
                f"Template {self.template_path} includes a missing template: {exc.name}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise TemplateError(
                f"Template {self.template_path} includes a file that is not valid UTF-8"
            ) from exc
        except JinjaTemplateError as exc:
            raise TemplateError(f"Failed to render {self.template_path}: {exc}") from exc

    def write(
        self,
        package: PackageRef,
        sources: SourceSet,
        output: OutputConfig,
        destination: Path,
    ) -> RenderedDoxyfile:
        """Render and write the Doxyfile into ``destination``."""
        text = self.render(package, sources, output)
        path = destination / DOXYFILE_NAME
        try:
            destination.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise TemplateError(f"Unable to write {path}: {exc}") from exc
        self.logger.debug("Wrote %s", path)
        return RenderedDoxyfile(path=path, text=text)

    # ------------------------------------------------------------------
    # Internals

    def _load_template(self):
        if not self.template_path.is_file():
            raise TemplateError(f"Doxyfile template not found at {self.template_path}")
        env = self._environment()
        try:
            return env.get_template(self.template_path.name)
        except TemplateNotFound as exc:
            raise TemplateError(f"Doxyfile template not found at {self.template_path}") from exc
        except TemplateSyntaxError as exc:
            raise TemplateError(
                f"Doxyfile template {self.template_path} is malformed (line {exc.lineno}): {exc.message}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise TemplateError(f"Doxyfile template {self.template_path} is not valid UTF-8") from exc
        except JinjaTemplateError as exc:
            raise TemplateError(f"Failed to load {self.template_path}: {exc}") from exc

    def _environment(self) -> Environment:
        if self._env is None:
            env = Environment(
                loader=FileSystemLoader(str(self.template_path.parent)),
                undefined=StrictUndefined,
                autoescape=False,
                keep_trailing_newline=True,
                trim_blocks=True,
                lstrip_blocks=True,
            )
            env.filters["doxylist"] = format_doxygen_list
            self._env = env
        return self._env


__all__ = ["ConfigGenerator", "DEFAULT_TEMPLATE", "DOXYFILE_NAME", "format_doxygen_list"]
