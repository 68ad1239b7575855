"""Runs doxygen and locates its HTML entry point."""

from __future__ import annotations

from pathlib import Path

from ..errors import GenerationError
from ..logging import get_logger
from ..process import Runner, run_command, run_tool

ENTRY_POINT = "index.html"


class DocRunner:
    """Executes doxygen against a rendered Doxyfile."""

    def __init__(
        self,
        executable: str = "doxygen",
        *,
        html_output: str = ".",
        runner: Runner | None = None,
    ) -> None:
        self.executable = executable
        self.html_output = html_output
        self._runner = runner or run_command
        self.logger = get_logger("doxygen.run")

    def entry_point(self, output_dir: Path) -> Path:
        return output_dir / self.html_output / ENTRY_POINT

    def generate(self, doxyfile: Path, output_dir: Path) -> Path:
        """Run doxygen and return the path of the generated ``index.html``."""
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise GenerationError(f"Unable to create output directory {output_dir}: {exc}") from exc
        result = run_tool(
            self._runner,
            [self.executable, str(doxyfile)],
            cwd=doxyfile.parent,
            error_type=GenerationError,
            action="doxygen",
        )
        if result.stderr.strip():
            self.logger.debug("doxygen warnings:\n%s", result.stderr.rstrip())

        entry_point = self.entry_point(output_dir)
        if not entry_point.is_file():
            raise GenerationError(
                f"doxygen finished but {entry_point} was not generated",
                diagnostics=result.diagnostics,
            )
        return entry_point.resolve()
