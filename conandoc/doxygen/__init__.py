"""Doxyfile rendering and doxygen execution."""

from .config import ConfigGenerator, format_doxygen_list
from .runner import DocRunner

__all__ = ["ConfigGenerator", "DocRunner", "format_doxygen_list"]
