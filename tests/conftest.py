from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from tests._fixtures.fake_tools import FakeTools, info_entry


@pytest.fixture(autouse=True)
def _reset_conandoc_logger():
    """Undo configure_logging so caplog sees records in every test."""
    yield
    logger = logging.getLogger("conandoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """A conan package with a conanfile and a sources directory."""
    root = tmp_path / "hello"
    (root / "sources").mkdir(parents=True)
    (root / "conanfile.py").write_text(
        textwrap.dedent(
            """
            from conans import ConanFile

            class HelloConan(ConanFile):
                name = "hello"
                version = "1.0"
                requires = "a/1.0", "b/2.0"
            """
        ).lstrip(),
        encoding="utf-8",
    )
    (root / "sources" / "hello.hpp").write_text("int hello();\n", encoding="utf-8")
    return root


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Package folders for dependencies a/1.0 and b/2.0."""
    cache = tmp_path / "conan-cache"
    for name in ("a", "b"):
        (cache / name / "include").mkdir(parents=True)
    return cache


@pytest.fixture
def fake_tools(cache_dir: Path) -> FakeTools:
    return FakeTools(
        dependencies=[
            info_entry("a/1.0", cache_dir / "a"),
            info_entry("b/2.0", cache_dir / "b"),
        ]
    )
