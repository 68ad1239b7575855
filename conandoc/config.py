"""Configuration loading for conandoc (.conandoc.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".conandoc.yml"

MISSING_SOURCES_SKIP = "skip"
MISSING_SOURCES_FAIL = "fail"
_MISSING_SOURCES_POLICIES = (MISSING_SOURCES_SKIP, MISSING_SOURCES_FAIL)

ENV_CONAN_KEYS = ("CONANDOC_CONAN",)
ENV_DOXYGEN_KEYS = ("CONANDOC_DOXYGEN",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ConanConfig:
    """How the conan CLI is invoked."""

    executable: str = "conan"
    install_wrapper: List[str] = field(default_factory=list)
    profile: str = "default"
    install_folder: str = ".conan"


@dataclass
class SourcesConfig:
    """Where sources are found for dependencies and for the package itself."""

    dir: str = "sources"
    folder_key: str = "package_folder"
    on_missing: str = MISSING_SOURCES_SKIP


@dataclass
class DoxygenConfig:
    """Doxygen executable, template and extra Doxyfile settings."""

    executable: str = "doxygen"
    template: Optional[Path] = None
    html_output: str = "."
    settings: Dict[str, str] = field(default_factory=dict)


@dataclass
class ConanDocConfig:
    """Represents the settings defined in .conandoc.yml."""

    root: Path
    conan: ConanConfig = field(default_factory=ConanConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    doxygen: DoxygenConfig = field(default_factory=DoxygenConfig)
    output_dir: Optional[Path] = None


def load_config(
    config_path: Path,
    *,
    explicit: bool = False,
    environ: Mapping[str, str] | None = None,
) -> ConanDocConfig:
    """Load configuration from disk.

    By default ``config_path`` is a package directory or manifest and a missing
    ``.conandoc.yml`` beside it yields defaults. With ``explicit`` the path names
    the configuration file itself and must exist.
    """
    environ = os.environ if environ is None else environ
    if explicit:
        config_file = config_path.expanduser().resolve()
        if not config_file.is_file():
            raise ConfigError(f"Configuration file {config_path} does not exist")
    else:
        config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    conan = ConanConfig()
    conan_data = _as_dict(data.get("conan"))
    if conan_data:
        conan.executable = _as_str(conan_data.get("executable")) or conan.executable
        conan.install_wrapper = _as_str_list(conan_data.get("install_wrapper"))
        conan.profile = _as_str(conan_data.get("profile")) or conan.profile
        conan.install_folder = _as_str(conan_data.get("install_folder")) or conan.install_folder
    conan.executable = _first_env_value(environ, ENV_CONAN_KEYS) or conan.executable

    sources = SourcesConfig()
    sources_data = _as_dict(data.get("sources"))
    if sources_data:
        sources.dir = _as_str(sources_data.get("dir")) or sources.dir
        sources.folder_key = _as_str(sources_data.get("folder_key")) or sources.folder_key
        on_missing = _as_str(sources_data.get("on_missing"))
        if on_missing is not None:
            on_missing = on_missing.strip().lower()
            if on_missing not in _MISSING_SOURCES_POLICIES:
                raise ConfigError(
                    f"sources.on_missing must be one of {', '.join(_MISSING_SOURCES_POLICIES)}"
                )
            sources.on_missing = on_missing

    doxygen = DoxygenConfig()
    doxygen_data = _as_dict(data.get("doxygen"))
    if doxygen_data:
        doxygen.executable = _as_str(doxygen_data.get("executable")) or doxygen.executable
        template = _as_str(doxygen_data.get("template"))
        doxygen.template = root / template if template else None
        doxygen.html_output = _as_str(doxygen_data.get("html_output")) or doxygen.html_output
        doxygen.settings = _as_settings(doxygen_data.get("settings"))
    doxygen.executable = _first_env_value(environ, ENV_DOXYGEN_KEYS) or doxygen.executable

    output_data = _as_dict(data.get("output"))
    output_str = _as_str(output_data.get("dir")) if output_data else None
    output_dir = root / output_str if output_str else None

    return ConanDocConfig(
        root=root,
        conan=conan,
        sources=sources,
        doxygen=doxygen,
        output_dir=output_dir,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        # A conanfile was passed; look beside it.
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(environ: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = environ.get(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "YES" if value else "NO"
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_settings(value: Any) -> Dict[str, str]:
    settings: Dict[str, str] = {}
    for key, raw in _as_dict(value).items():
        converted = _as_str(raw)
        if isinstance(key, str) and converted is not None:
            settings[key.strip().upper()] = converted
    return settings
