"""Pipeline orchestration for documentation runs."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from .browser import BrowserLauncher, Opener
from .conan import Inspector, Installer, SourceCollector, locate_manifest
from .config import MISSING_SOURCES_FAIL, ConanDocConfig, load_config
from .doxygen import ConfigGenerator, DocRunner
from .errors import ConanDocError
from .logging import get_logger
from .models import OutputConfig, PackageRef, RenderedDoxyfile, SourceSet
from .process import Runner, run_command

TOTAL_STEPS = 5


class PipelineStage(str, Enum):
    """States visited by a documentation run."""

    START = "start"
    INSPECTED = "inspected"
    INSTALLED = "installed"
    SOURCES_COLLECTED = "sources_collected"
    CONFIG_RENDERED = "config_rendered"
    DOCS_GENERATED = "docs_generated"
    OPENED = "opened"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineState:
    """Data accumulated as the run moves from stage to stage."""

    src: Path
    output_dir: Optional[Path]
    open_after_build: bool
    workdir: Path
    package_root: Optional[Path] = None
    package: Optional[PackageRef] = None
    sources: Optional[SourceSet] = None
    output: Optional[OutputConfig] = None
    doxyfile: Optional[RenderedDoxyfile] = None
    entry_point: Optional[Path] = None
    opened: bool = False
    history: List[PipelineStage] = field(default_factory=lambda: [PipelineStage.START])

    @property
    def stage(self) -> PipelineStage:
        return self.history[-1]

    def advance(self, stage: PipelineStage) -> "PipelineState":
        self.history.append(stage)
        return self

    def require(self, attribute: str) -> Any:
        """Return a value an earlier stage produced, failing if it never ran."""
        value = getattr(self, attribute)
        if value is None:
            raise ConanDocError(f"{attribute} is not available in state {self.stage.value}")
        return value


@dataclass
class RunOutcome:
    """Result of a completed documentation run."""

    package: PackageRef
    sources: SourceSet
    output_dir: Path
    entry_point: Path
    opened: bool
    history: Sequence[PipelineStage]


Stage = Callable[[PipelineState], PipelineState]


class Orchestrator:
    """Runs inspect, install, collect, render and generate in strict order.

    Every stage receives the state produced by the previous one. The first
    ``ConanDocError`` moves the run to ``FAILED`` and propagates unchanged;
    nothing is retried or rolled back.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        opener: Opener | None = None,
    ) -> None:
        self._runner = runner or run_command
        self._opener = opener
        self.logger = get_logger("orchestrator")
        self.last_state: PipelineState | None = None

    def run(
        self,
        src: Path | str,
        *,
        out: Path | str | None = None,
        open_browser: bool = False,
        config: ConanDocConfig | None = None,
        strict_sources: bool = False,
    ) -> RunOutcome:
        """Generate documentation for the conan package at ``src``."""
        src_path = Path(src).expanduser().resolve()
        config = config or load_config(src_path)
        if strict_sources:
            config = replace(config, sources=replace(config.sources, on_missing=MISSING_SOURCES_FAIL))
        self._configure(config)
        output_dir = Path(out).expanduser().resolve() if out is not None else None

        with tempfile.TemporaryDirectory(prefix="conandoc-") as workdir:
            state = PipelineState(
                src=src_path,
                output_dir=output_dir,
                open_after_build=open_browser,
                workdir=Path(workdir),
            )
            self.last_state = state
            try:
                for stage in self._stages():
                    state = stage(state)
            except ConanDocError as exc:
                state.advance(PipelineStage.FAILED)
                self.logger.debug("Run failed during %s: %s", exc.stage, exc.message)
                raise

        return RunOutcome(
            package=state.require("package"),
            sources=state.require("sources"),
            output_dir=state.require("output").output_dir,
            entry_point=state.require("entry_point"),
            opened=state.opened,
            history=tuple(state.history),
        )

    # ------------------------------------------------------------------
    # Stages

    def _stages(self) -> Sequence[Stage]:
        return (
            self._inspect,
            self._install,
            self._collect_sources,
            self._render_config,
            self._generate_docs,
            self._open_docs,
        )

    def _inspect(self, state: PipelineState) -> PipelineState:
        manifest = locate_manifest(state.src)
        state.package_root = manifest.parent
        state.package = self.inspector.inspect(manifest)
        self.logger.info(
            "Generating documentation for %s with %s",
            state.package.reference,
            list(state.package.requires),
        )
        return state.advance(PipelineStage.INSPECTED)

    def _install(self, state: PipelineState) -> PipelineState:
        self._step(1, "Fetching packages...")
        self.installer.install(state.require("package_root"))
        self.logger.info("Finished conan install")
        return state.advance(PipelineStage.INSTALLED)

    def _collect_sources(self, state: PipelineState) -> PipelineState:
        self._step(2, "Gathering sources...")
        state.sources = self.collector.collect(state.require("package_root"))
        self.logger.info("Found %d source locations", len(state.sources))
        return state.advance(PipelineStage.SOURCES_COLLECTED)

    def _render_config(self, state: PipelineState) -> PipelineState:
        self._step(3, "Resolving output...")
        output_dir = state.output_dir or self._default_output_dir(state)
        state.output = OutputConfig(output_dir=output_dir, open_after_build=state.open_after_build)
        self.logger.info("Output location is %s", output_dir)

        self._step(4, "Generating Doxyfile...")
        state.doxyfile = self.generator.write(
            state.require("package"), state.require("sources"), state.output, state.workdir
        )
        self.logger.info("Generated Doxyfile")
        return state.advance(PipelineStage.CONFIG_RENDERED)

    def _generate_docs(self, state: PipelineState) -> PipelineState:
        self._step(5, "Running doxygen...")
        state.entry_point = self.doc_runner.generate(
            state.require("doxyfile").path, state.require("output").output_dir
        )
        self.logger.debug("doxygen wrote %s", state.entry_point)
        return state.advance(PipelineStage.DOCS_GENERATED)

    def _open_docs(self, state: PipelineState) -> PipelineState:
        if not state.open_after_build:
            return state.advance(PipelineStage.DONE)
        state.opened = self.browser.open(state.require("entry_point"))
        return state.advance(PipelineStage.OPENED if state.opened else PipelineStage.DONE)

    # ------------------------------------------------------------------
    # Helpers

    def _configure(self, config: ConanDocConfig) -> None:
        self.config = config
        self.inspector = Inspector(config.conan, runner=self._runner)
        self.installer = Installer(config.conan, runner=self._runner)
        self.collector = SourceCollector(config.conan, config.sources, runner=self._runner)
        self.generator = ConfigGenerator(
            config.doxygen.template,
            html_output=config.doxygen.html_output,
            settings=config.doxygen.settings,
        )
        self.doc_runner = DocRunner(
            config.doxygen.executable,
            html_output=config.doxygen.html_output,
            runner=self._runner,
        )
        self.browser = BrowserLauncher(self._opener)

    def _default_output_dir(self, state: PipelineState) -> Path:
        package = state.require("package")
        base = self.config.output_dir or state.require("package_root") / "build" / "docs"
        return (base / f"{package.name}_{package.version}").resolve()

    def _step(self, index: int, message: str) -> None:
        self.logger.info("[%d/%d] %s", index, TOTAL_STEPS, message)


__all__ = ["Orchestrator", "PipelineStage", "PipelineState", "RunOutcome"]
