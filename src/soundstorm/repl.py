"""Line-mode front end."""

from typing import Callable

import click

from .session import Session


PROMPT = "> "

BANNER = [
    "Soundstorm CLI Player",
    "Type 'help' to see available commands.",
]


def announce(title: str) -> None:
    """Print a title change from the poller thread and restore the prompt."""
    click.echo(f"\nNow playing: {title}")
    click.echo(PROMPT, nl=False)


def run_repl(session: Session, read_line: Callable[[str], str] = input) -> int:
    """
    Read commands until exit, Ctrl+C or end of input.

    Args:
        session: Session the commands are dispatched to
        read_line: Prompt-and-read function, ``input`` by default

    Returns:
        int: Exit code
    """
    for line in BANNER:
        click.echo(line)

    while True:
        try:
            result = session.dispatch(read_line(PROMPT))
        except KeyboardInterrupt:
            click.echo("\nReceived Ctrl+C, exiting...")
            session.shutdown()
            return 0
        except EOFError:
            click.echo("")
            for message in session.exit():
                click.echo(message)
            return 0

        for message in result.messages:
            click.echo(message)

        if not result.keep_running:
            return 0
