"""Dependency installation via ``conan install``."""

from __future__ import annotations

from pathlib import Path

from ..config import ConanConfig
from ..errors import DependencyFetchError
from ..logging import get_logger
from ..process import Runner, run_command, run_tool


class Installer:
    """Fetches the package's dependency closure into the conan cache."""

    def __init__(self, config: ConanConfig | None = None, runner: Runner | None = None) -> None:
        self.config = config or ConanConfig()
        self._runner = runner or run_command
        self.logger = get_logger("conan.install")

    def command(self, package_root: Path) -> list[str]:
        install_folder = package_root / self.config.install_folder
        return [
            *self.config.install_wrapper,
            self.config.executable,
            "install",
            str(package_root),
            "-pr",
            self.config.profile,
            "-if",
            str(install_folder),
        ]

    def install(self, package_root: Path) -> None:
        args = self.command(package_root)
        self.logger.debug("Running %s", " ".join(args))
        result = run_tool(
            self._runner,
            args,
            cwd=package_root,
            error_type=DependencyFetchError,
            action="conan install",
        )
        if result.stdout.strip():
            self.logger.debug("conan install output:\n%s", result.stdout.rstrip())
