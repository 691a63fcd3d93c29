from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner as RichSpinner
from rich.text import Text


class Spinner:
    """Transient status line. Disabled spinners are no-ops so callers never branch."""

    def __init__(self, console: Console, text: str, enabled: bool = True) -> None:
        self.console = console
        self.text = text
        self.enabled = enabled
        self._live: Live | None = None
        self._renderable = RichSpinner("line", text=Text(text, style="cyan"), style="cyan")

    def start(self) -> None:
        if not self.enabled or self._live is not None:
            return
        self._renderable.text = Text(self.text, style="cyan")
        self._live = Live(
            self._renderable,
            console=self.console,
            transient=True,
            refresh_per_second=12,
        )
        self._live.start()

    def stop(self) -> None:
        if self._live is None:
            return
        try:
            self._live.stop()
        finally:
            self._live = None

    @property
    def is_running(self) -> bool:
        return self._live is not None

    @contextmanager
    def paused(self) -> Iterator[None]:
        """Stop the spinner while printing, then resume it."""
        was_running = self.is_running
        self.stop()
        try:
            yield
        finally:
            if was_running:
                self.start()

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *exc: Any) -> Literal[False]:
        # runs on KeyboardInterrupt too, so the terminal is restored before exit
        self.stop()
        return False
