"""Full-screen terminal front end."""

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Static

from .session import Session


APP_TITLE = "Soundstorm CLI Player"
HINT = "Press 's' to start, 'p' to pause, 'x' to stop, 'i' for info, 'q' to quit."
NOTHING_PLAYING = "-"


class SoundstormApp(App):
    """Now-playing panel with single-key playback controls."""

    TITLE = APP_TITLE

    CSS = """
    #panel {
        border: round $accent;
        border-title-align: center;
        align: center middle;
        height: 100%;
    }
    #panel > Static {
        width: 100%;
        content-align: center middle;
        text-align: center;
    }
    #label {
        color: yellow;
    }
    #status {
        text-style: italic;
    }
    """

    BINDINGS = [
        ("s", "command('start')", "Start"),
        ("p", "command('pause')", "Pause"),
        ("x", "command('stop')", "Stop"),
        ("i", "command('status')", "Info"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, session: Session):
        super().__init__()
        self.session = session
        self.track_text = NOTHING_PLAYING
        self.status_text = ""

    def compose(self) -> ComposeResult:
        with Vertical(id="panel"):
            yield Static("Now playing:", id="label")
            yield Static(self.track_text, id="track")
            yield Static("")
            yield Static(self.status_text, id="status")
            yield Static(HINT, id="hint")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#panel").border_title = APP_TITLE
        self.set_interval(self.session.config.poll_interval, self.refresh_now_playing)

    def refresh_now_playing(self) -> None:
        title = self.session.now_playing.snapshot() or NOTHING_PLAYING
        if title != self.track_text:
            self.track_text = title
            self.query_one("#track", Static).update(title)

    def show_status(self, text: str) -> None:
        self.status_text = text
        self.query_one("#status", Static).update(text)

    def action_command(self, name: str) -> None:
        # start blocks while mpv comes up, so commands run off the event loop
        self.show_status(f"{name}...")
        self.run_worker(
            lambda: self._run_command(name),
            thread=True,
            exclusive=True,
            group="commands",
        )

    def _run_command(self, name: str) -> None:
        result = self.session.dispatch(name)
        self.call_from_thread(self._command_done, result.messages)

    def _command_done(self, messages: list[str]) -> None:
        self.show_status(" ".join(messages))
        self.refresh_now_playing()


def run_tui(session: Session) -> int:
    """Run the full-screen UI until the user quits, then shut the session down."""
    app = SoundstormApp(session)
    try:
        app.run()
    finally:
        session.shutdown()
    return 0
