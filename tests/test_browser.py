"""Tests for launching generated docs."""

from __future__ import annotations

import logging
import webbrowser
from pathlib import Path

import pytest

from conandoc.browser import BrowserLauncher


def test_open_passes_file_uri(tmp_path: Path) -> None:
    index = tmp_path / "index.html"
    index.write_text("<html></html>", encoding="utf-8")
    opened = []

    def opener(uri: str) -> bool:
        opened.append(uri)
        return True

    assert BrowserLauncher(opener).open(index) is True
    assert opened == [index.resolve().as_uri()]


def test_open_returns_false_when_no_browser(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING)

    assert BrowserLauncher(lambda uri: False).open(tmp_path / "index.html") is False
    assert "no browser could handle the request" in caplog.text


def test_open_swallows_browser_errors(tmp_path: Path) -> None:
    def opener(uri: str) -> bool:
        raise webbrowser.Error("could not locate runnable browser")

    assert BrowserLauncher(opener).open(tmp_path / "index.html") is False
