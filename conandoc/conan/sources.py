"""Source discovery via ``conan info``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from ..config import MISSING_SOURCES_FAIL, ConanConfig, SourcesConfig
from ..errors import DependencyFetchError
from ..logging import get_logger
from ..models import DependencySource, SourceSet
from ..process import Runner, run_command, run_tool


class SourceCollector:
    """Resolves cached dependency folders and the package's own sources.

    Dependencies keep the order ``conan info`` reports them in and the
    package's own source directory is always appended last. A dependency
    without a usable folder is skipped with a warning, or raises
    ``DependencyFetchError`` when ``on_missing`` is ``fail``.
    """

    def __init__(
        self,
        config: ConanConfig | None = None,
        sources: SourcesConfig | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.config = config or ConanConfig()
        self.sources = sources or SourcesConfig()
        self._runner = runner or run_command
        self.logger = get_logger("conan.sources")

    def collect(self, package_root: Path) -> SourceSet:
        entries = self._info(package_root)
        source_set = SourceSet()
        for entry in entries:
            dependency = self._resolve(entry)
            if dependency is not None:
                source_set.dependencies.append(dependency)

        own_sources = package_root / self.sources.dir
        if not own_sources.is_dir():
            self.logger.warning("Package sources not found at %s", own_sources)
        source_set.package_sources = own_sources
        return source_set

    # ------------------------------------------------------------------
    # Internals

    def _info(self, package_root: Path) -> List[Any]:
        args = [self.config.executable, "info", str(package_root), "--paths", "--json"]
        result = run_tool(
            self._runner,
            args,
            cwd=package_root,
            error_type=DependencyFetchError,
            action="conan info",
        )
        # conan prints progress lines first; the JSON document is the last line.
        lines = [line for line in result.stdout.splitlines() if line.strip()]
        if not lines:
            raise DependencyFetchError(
                "conan info produced no output", diagnostics=result.diagnostics
            )
        try:
            payload = json.loads(lines[-1])
        except json.JSONDecodeError as exc:
            raise DependencyFetchError(
                f"conan info returned invalid JSON: {exc}", diagnostics=result.diagnostics
            ) from exc
        if not isinstance(payload, list):
            raise DependencyFetchError(
                "conan info JSON must be a list of packages", diagnostics=result.diagnostics
            )
        return payload

    def _resolve(self, entry: Any) -> DependencySource | None:
        if not isinstance(entry, dict):
            return self._missing("<unknown>", "malformed cache entry")
        # The consumer conanfile itself is listed with is_ref false.
        if entry.get("is_ref") is False:
            return None
        reference = str(entry.get("reference") or "<unknown>")
        folder = entry.get(self.sources.folder_key)
        if not isinstance(folder, str) or not folder.strip():
            return self._missing(reference, f"no {self.sources.folder_key} reported")
        path = Path(folder)
        if not path.is_dir():
            return self._missing(reference, f"{path} is not a directory")
        return DependencySource(reference=reference, path=path)

    def _missing(self, reference: str, reason: str) -> None:
        if self.sources.on_missing == MISSING_SOURCES_FAIL:
            raise DependencyFetchError(f"Cannot resolve sources for {reference}: {reason}")
        self.logger.warning("Skipping %s: %s", reference, reason)
        return None
