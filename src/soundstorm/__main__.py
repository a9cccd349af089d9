"""Main entry point for the Soundstorm CLI."""

from .cli import cli


def main() -> None:
    """Run the soundstorm command group."""
    cli(prog_name="soundstorm")


if __name__ == "__main__":
    main()
