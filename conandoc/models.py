"""Core data models shared across conandoc components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple


@dataclass(frozen=True)
class PackageRef:
    """Name and version reported by ``conan inspect``."""

    name: str
    version: str
    requires: Tuple[str, ...] = ()

    @property
    def reference(self) -> str:
        return f"{self.name}/{self.version}"


@dataclass(frozen=True)
class DependencySource:
    """Source location resolved for one cached dependency."""

    reference: str
    path: Path


@dataclass
class SourceSet:
    """Ordered input paths for doxygen; the package's own sources come last."""

    dependencies: List[DependencySource] = field(default_factory=list)
    package_sources: Path | None = None

    @property
    def paths(self) -> List[Path]:
        paths = [dependency.path for dependency in self.dependencies]
        if self.package_sources is not None:
            paths.append(self.package_sources)
        return paths

    def __len__(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class OutputConfig:
    """Output location and post-build behaviour chosen by the invoker."""

    output_dir: Path
    open_after_build: bool = False


@dataclass(frozen=True)
class RenderedDoxyfile:
    """A Doxyfile rendered for a single run."""

    path: Path
    text: str
