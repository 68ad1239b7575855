"""Subprocess execution shared by the conan and doxygen stages."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence, Type

from .errors import ConanDocError


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of an external command."""

    args: Sequence[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostics(self) -> str:
        """Return whatever the tool printed, stderr first."""
        parts = [part.rstrip() for part in (self.stderr, self.stdout) if part and part.strip()]
        return "\n".join(parts)


Runner = Callable[..., CommandResult]


def run_command(
    args: Iterable[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run ``args`` to completion, buffering stdout and stderr.

    A missing executable surfaces as ``FileNotFoundError``; a non-zero exit is
    reported through ``CommandResult.returncode`` rather than raised.
    """
    argv = list(args)
    completed = subprocess.run(
        argv,
        cwd=str(cwd) if cwd is not None else None,
        env=env,
        check=False,
        text=True,
        capture_output=True,
    )
    return CommandResult(
        args=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def run_tool(
    runner: Runner,
    args: Sequence[str],
    *,
    cwd: Path | None,
    error_type: Type[ConanDocError],
    action: str,
) -> CommandResult:
    """Run an external tool and raise ``error_type`` unless it exits cleanly."""
    try:
        result = runner(list(args), cwd=cwd)
    except (FileNotFoundError, PermissionError) as exc:
        raise error_type(
            f"Unable to run '{args[0]}' for {action}. Ensure it is available in PATH."
        ) from exc
    if not result.ok:
        raise error_type(
            f"{action} exited with status {result.returncode}",
            diagnostics=result.diagnostics,
        )
    return result


__all__ = ["CommandResult", "Runner", "run_command", "run_tool"]
