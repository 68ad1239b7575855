"""Tests for conandoc.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from conandoc.config import ConanDocConfig, DoxygenConfig
from conandoc.errors import ConanDocError, DependencyFetchError, GenerationError, ResolutionError
from conandoc.orchestrator import Orchestrator, PipelineStage, PipelineState
from tests._fixtures.fake_tools import FakeTools, info_entry


def _input_paths(doxyfile: str) -> list[str]:
    lines = doxyfile.splitlines()
    start = next(index for index, line in enumerate(lines) if line.startswith("INPUT "))
    block = [lines[start].split("=", 1)[1]]
    while block[-1].rstrip().endswith("\\"):
        start += 1
        block.append(lines[start])
    return [entry.strip().rstrip("\\").strip().strip('"') for entry in block]


def test_run_generates_docs_for_package_and_dependencies(
    package_dir: Path, cache_dir: Path, fake_tools: FakeTools, tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.chdir(tmp_path)

    outcome = Orchestrator(runner=fake_tools).run(package_dir, out="./docs")

    assert outcome.entry_point == (tmp_path / "docs" / "index.html").resolve()
    assert outcome.entry_point.is_file()
    assert outcome.package.reference == "hello/1.0"
    assert outcome.opened is False
    assert fake_tools.commands() == ["inspect", "inspect", "inspect", "install", "info", "doxygen"]
    assert _input_paths(fake_tools.doxyfiles[0]) == [
        str(cache_dir / "a"),
        str(cache_dir / "b"),
        str(package_dir / "sources"),
    ]
    assert list(outcome.history) == [
        PipelineStage.START,
        PipelineStage.INSPECTED,
        PipelineStage.INSTALLED,
        PipelineStage.SOURCES_COLLECTED,
        PipelineStage.CONFIG_RENDERED,
        PipelineStage.DOCS_GENERATED,
        PipelineStage.DONE,
    ]


def test_run_opens_entry_point_when_requested(
    package_dir: Path, fake_tools: FakeTools, tmp_path: Path
) -> None:
    opened: list[str] = []

    def opener(uri: str) -> bool:
        opened.append(uri)
        return True

    outcome = Orchestrator(runner=fake_tools, opener=opener).run(
        package_dir, out=tmp_path / "docs", open_browser=True
    )

    assert opened == [(tmp_path / "docs" / "index.html").resolve().as_uri()]
    assert outcome.opened is True
    assert outcome.history[-1] is PipelineStage.OPENED


def test_browser_failure_does_not_fail_run(
    package_dir: Path, fake_tools: FakeTools, tmp_path: Path
) -> None:
    outcome = Orchestrator(runner=fake_tools, opener=lambda uri: False).run(
        package_dir, out=tmp_path / "docs", open_browser=True
    )

    assert outcome.opened is False
    assert outcome.history[-1] is PipelineStage.DONE
    assert outcome.entry_point.is_file()


def test_invalid_package_stops_before_any_tool(tmp_path: Path, fake_tools: FakeTools) -> None:
    orchestrator = Orchestrator(runner=fake_tools)

    with pytest.raises(ResolutionError, match="does not exist"):
        orchestrator.run(tmp_path / "nope", out=tmp_path / "docs")

    assert fake_tools.calls == []
    assert orchestrator.last_state is not None
    assert orchestrator.last_state.stage is PipelineStage.FAILED
    assert not (tmp_path / "docs").exists()


def test_install_failure_short_circuits(
    package_dir: Path, fake_tools: FakeTools, tmp_path: Path
) -> None:
    fake_tools.fail("install", stderr="ERROR: Unable to find 'a/1.0' in remotes\n")
    orchestrator = Orchestrator(runner=fake_tools)

    with pytest.raises(DependencyFetchError) as excinfo:
        orchestrator.run(package_dir, out=tmp_path / "docs")

    assert excinfo.value.diagnostics == "ERROR: Unable to find 'a/1.0' in remotes"
    assert "info" not in fake_tools.commands()
    assert "doxygen" not in fake_tools.commands()
    assert fake_tools.doxyfiles == []
    assert orchestrator.last_state is not None
    assert orchestrator.last_state.doxyfile is None
    assert orchestrator.last_state.history == [
        PipelineStage.START,
        PipelineStage.INSPECTED,
        PipelineStage.FAILED,
    ]


def test_doxygen_failure_is_fatal(package_dir: Path, fake_tools: FakeTools, tmp_path: Path) -> None:
    fake_tools.fail("doxygen", stderr="error: Doxyfile: unknown tag\n")

    with pytest.raises(GenerationError) as excinfo:
        Orchestrator(runner=fake_tools).run(package_dir, out=tmp_path / "docs")

    assert "unknown tag" in excinfo.value.diagnostics


def test_rendered_doxyfile_does_not_outlive_run(
    package_dir: Path, fake_tools: FakeTools, tmp_path: Path
) -> None:
    orchestrator = Orchestrator(runner=fake_tools)

    orchestrator.run(package_dir, out=tmp_path / "docs")

    assert orchestrator.last_state is not None
    assert orchestrator.last_state.doxyfile is not None
    assert not orchestrator.last_state.doxyfile.path.exists()


def test_default_output_dir_uses_name_and_version(package_dir: Path, fake_tools: FakeTools) -> None:
    outcome = Orchestrator(runner=fake_tools).run(package_dir)

    expected = (package_dir / "build" / "docs" / "hello_1.0").resolve()
    assert outcome.output_dir == expected
    assert outcome.entry_point == expected / "index.html"


def test_configured_output_dir_and_html_output(
    package_dir: Path, fake_tools: FakeTools, tmp_path: Path
) -> None:
    config = ConanDocConfig(
        root=package_dir,
        doxygen=DoxygenConfig(html_output="html"),
        output_dir=tmp_path / "site",
    )

    outcome = Orchestrator(runner=fake_tools).run(package_dir, config=config)

    assert outcome.entry_point == (tmp_path / "site" / "hello_1.0" / "html" / "index.html").resolve()


def test_strict_sources_fails_on_unresolvable_dependency(
    package_dir: Path, cache_dir: Path, tmp_path: Path
) -> None:
    tools = FakeTools(dependencies=[info_entry("a/1.0", cache_dir / "a"), info_entry("c/0.1", None)])

    with pytest.raises(DependencyFetchError, match="c/0.1"):
        Orchestrator(runner=tools).run(package_dir, out=tmp_path / "docs", strict_sources=True)

    assert "doxygen" not in tools.commands()


def test_unresolvable_dependency_is_skipped_by_default(
    package_dir: Path, cache_dir: Path, tmp_path: Path
) -> None:
    tools = FakeTools(dependencies=[info_entry("a/1.0", cache_dir / "a"), info_entry("c/0.1", None)])

    outcome = Orchestrator(runner=tools).run(package_dir, out=tmp_path / "docs")

    assert outcome.sources.paths == [cache_dir / "a", package_dir / "sources"]
    assert _input_paths(tools.doxyfiles[0]) == [str(cache_dir / "a"), str(package_dir / "sources")]


def test_state_refuses_values_no_stage_produced(tmp_path: Path) -> None:
    state = PipelineState(
        src=tmp_path, output_dir=None, open_after_build=False, workdir=tmp_path
    )
    state.package_root = tmp_path

    assert state.require("package_root") == tmp_path
    with pytest.raises(ConanDocError, match="package is not available in state start"):
        state.require("package")
