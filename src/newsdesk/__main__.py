"""Newsdesk CLI entry point:

    python -m newsdesk --help
"""

from newsdesk.cli.app import cli

if __name__ == "__main__":
    cli()
