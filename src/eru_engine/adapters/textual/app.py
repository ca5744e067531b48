"""Executable Textual app that hosts an editing session."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use eru_engine.adapters.textual.app"
    ) from exc

from eru_engine.runtime import telemetry

from .controller import QUIT_TIMES, EditorSession, SessionHooks

# status bar + message bar
_CHROME_LINES = 2


class EruApp(App[None]):
    """Full-screen editor: document view, status bar, and message bar."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-view {
		height: 1fr;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: rgb(239,239,239);
		color: rgb(63,63,63);
	}

	#message-line {
		height: 1;
	}
	"""

    def __init__(self, path: Optional[str] = None, *, quit_times: int = QUIT_TIMES) -> None:
        super().__init__()
        self._path = path
        self._quit_times = quit_times
        self.session: EditorSession | None = None
        self._view_widget: Static | None = None
        self._status_widget: Static | None = None
        self._message_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._view_widget = Static("", id="document-view")
        self._status_widget = Static("", id="status-line")
        self._message_widget = Static("", id="message-line")
        yield self._view_widget
        yield self._status_widget
        yield self._message_widget

    def on_mount(self) -> None:
        hooks = SessionHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            update_message=self._update_message,
        )
        self.session = EditorSession.open_path(
            self._path, quit_times=self._quit_times, hooks=hooks
        )
        self.session.resize(self.size.width, self.size.height - _CHROME_LINES)
        # the message bar expires on its own, so repaint it periodically
        self.set_interval(1.0, self._tick)

    def on_resize(self, event: events.Resize) -> None:
        if self.session:
            self.session.resize(event.size.width, event.size.height - _CHROME_LINES)

    def on_key(self, event: events.Key) -> None:
        if not self.session:
            return
        text = event.character if event.is_printable else None
        self._dispatch(event.key, text)
        event.stop()
        event.prevent_default()

    def action_quit(self) -> None:
        # App binds ctrl+q to quit; route it through the dirty-buffer check.
        self._dispatch("ctrl+q", None)

    def _dispatch(self, key: str, text: Optional[str]) -> None:
        if not self.session:
            return
        self.session.handle_key(key, text=text)
        if self.session.should_quit:
            self.exit()

    def _tick(self) -> None:
        if self.session:
            self._update_message(self.session.message_line())

    def _update_view(self, lines: Sequence[str]) -> None:
        if self._view_widget:
            self._view_widget.update(Text.from_ansi("\n".join(lines)))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(Text(status))

    def _update_message(self, message: str) -> None:
        if self._message_widget:
            self._message_widget.update(Text(message))


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="eru", description="Edit a text file.")
    parser.add_argument("path", nargs="?", help="File to open")
    parser.add_argument(
        "--quit-times",
        type=int,
        default=_env_int("ERU_ENGINE_QUIT_TIMES", QUIT_TIMES),
        help="Extra Ctrl-Q presses needed to quit with unsaved changes (default: 3)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Telemetry preset; defaults to ERU_ENGINE_* environment settings",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = EruApp(args.path, quit_times=max(args.quit_times, 0))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
