"""Package inspection via ``conan inspect``."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

from ..config import ConanConfig
from ..errors import ResolutionError
from ..logging import get_logger
from ..models import PackageRef
from ..process import Runner, run_command, run_tool

MANIFEST_NAMES = ("conanfile.py", "conanfile.txt")


def locate_manifest(src: Path) -> Path:
    """Return the conanfile for ``src``, which may be a directory or the file itself."""
    path = Path(src).expanduser()
    if not path.exists():
        raise ResolutionError(f"{src} does not exist")
    if path.is_file():
        if path.name not in MANIFEST_NAMES:
            raise ResolutionError(f"{src} is not a conan package manifest")
        return path.resolve()
    for name in MANIFEST_NAMES:
        candidate = path / name
        if candidate.is_file():
            return candidate.resolve()
    raise ResolutionError(
        f"{src} does not contain a conan package manifest ({' or '.join(MANIFEST_NAMES)})"
    )


def parse_requires(raw: str) -> Tuple[str, ...]:
    """Parse ``conan inspect --raw requires`` output such as ``['a/1.0', 'b/2.0']``."""
    text = raw.strip()
    if not text or text == "None":
        return ()
    text = text.strip("[]()")
    requires = []
    for part in text.split(","):
        cleaned = part.strip().strip("'\"").strip()
        if cleaned and cleaned != "None":
            requires.append(cleaned)
    return tuple(requires)


class Inspector:
    """Reads the package name, version and requirements from its manifest."""

    def __init__(self, config: ConanConfig | None = None, runner: Runner | None = None) -> None:
        self.config = config or ConanConfig()
        self._runner = runner or run_command
        self.logger = get_logger("conan.inspect")

    def inspect(self, src: Path) -> PackageRef:
        manifest = locate_manifest(src)
        name = self._raw(manifest, "name")
        version = self._raw(manifest, "version")
        if not name:
            raise ResolutionError(f"{manifest} does not declare a package name")
        if not version:
            raise ResolutionError(f"{manifest} does not declare a package version")
        requires = parse_requires(self._raw(manifest, "requires"))
        package = PackageRef(name=name, version=version, requires=requires)
        self.logger.debug("Inspected %s requiring %s", package.reference, list(requires))
        return package

    def _raw(self, manifest: Path, attribute: str) -> str:
        args = [self.config.executable, "inspect", str(manifest.parent), "--raw", attribute]
        result = run_tool(
            self._runner,
            args,
            cwd=manifest.parent,
            error_type=ResolutionError,
            action=f"conan inspect ({attribute})",
        )
        value = result.stdout.strip()
        return "" if value == "None" else value
