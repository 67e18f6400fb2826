"""Entry point for the toodo CLI.

Usage:
    python -m toodo.interfaces.cli.main

Or via installed entry point:
    toodo <command>
"""

from toodo.interfaces.cli import app


def main() -> None:
    """Run the toodo CLI application."""
    app()


if __name__ == "__main__":
    main()
