"""Wrappers around the conan CLI."""

from .inspector import Inspector, locate_manifest, parse_requires
from .installer import Installer
from .sources import SourceCollector

__all__ = [
    "Inspector",
    "Installer",
    "SourceCollector",
    "locate_manifest",
    "parse_requires",
]
