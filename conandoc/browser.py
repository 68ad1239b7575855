"""Best-effort launch of generated documentation in the default browser."""

from __future__ import annotations

import webbrowser
from pathlib import Path
from typing import Callable

from .errors import BrowserOpenError
from .logging import get_logger

Opener = Callable[[str], bool]


class BrowserLauncher:
    """Asks the host to open a local file with its default handler."""

    def __init__(self, opener: Opener | None = None) -> None:
        self._opener = opener or webbrowser.open
        self.logger = get_logger("browser")

    def open(self, path: Path) -> bool:
        """Open ``path``; failures are logged and reported as ``False``."""
        try:
            self._launch(path)
        except BrowserOpenError as exc:
            self.logger.warning("An error occurred when opening '%s': %s", path, exc.message)
            return False
        self.logger.info("Opened '%s' successfully.", path)
        return True

    def _launch(self, path: Path) -> None:
        uri = path.resolve().as_uri()
        try:
            opened = self._opener(uri)
        except (webbrowser.Error, OSError) as exc:
            raise BrowserOpenError(str(exc)) from exc
        if opened is False:
            raise BrowserOpenError("no browser could handle the request")
