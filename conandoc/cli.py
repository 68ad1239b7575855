"""CLI entrypoint for conandoc."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, load_config
from .errors import ConanDocError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conandoc",
        description="Generate doxygen documentation for a conan package and its dependencies.",
    )
    parser.add_argument("src", help="Path to conan package")
    parser.add_argument("--out", help="Path to output folder")
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open generated documentation",
    )
    parser.add_argument(
        "--config",
        help="Path to a .conandoc.yml file (defaults to the one beside the package manifest).",
    )
    parser.add_argument(
        "--strict-sources",
        action="store_true",
        help="Fail when a dependency has no resolvable sources instead of skipping it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        help="Write a debug log of the run, including conan and doxygen output, to this file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for conandoc."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    try:
        configure_logging(verbose=bool(args.verbose), log_file=log_file)
    except OSError as exc:
        parser.exit(1, f"conandoc: unable to open log file {log_file}: {exc}\n")

    try:
        if args.config:
            config = load_config(Path(args.config), explicit=True)
        else:
            config = load_config(Path(args.src))
    except ConfigError as exc:
        parser.exit(1, f"conandoc: {exc}\n")

    orchestrator = Orchestrator()
    try:
        outcome = orchestrator.run(
            args.src,
            out=args.out,
            open_browser=bool(args.open),
            config=config,
            strict_sources=bool(args.strict_sources),
        )
    except ConanDocError as exc:
        parser.exit(1, f"conandoc: {exc.report()}\n")
    except KeyboardInterrupt:
        parser.exit(130, "conandoc: interrupted\n")

    print(f"Docs can be found at {_relativize(outcome.entry_point)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
