"""
Command-Line Entry Point for Account Book

    account-book [DATA_FILE] [--log-level LEVEL] [--log-file PATH]

Without DATA_FILE the ledger file comes from ACCOUNT_BOOK_DATA_FILE
or defaults to ledger.csv in the current directory.

Exit codes:
    0  normal termination (menu exit or end of input)
    1  the application could not start or failed unexpectedly
"""

import sys
from typing import Optional

import typer

from account_book.audit import configure_logging, get_logger
from account_book.config import get_settings
from account_book.interface import LedgerConsole
from account_book.ledger import create_ledger_service
from account_book.validation import InputValidator


logger = get_logger(__name__)

app = typer.Typer(
    add_completion=False,
    help="Personal account book: record, list and filter dated transactions.",
)


@app.command()
def main(
    data_file: Optional[str] = typer.Argument(
        None, help="Ledger file to use (default: ledger.csv)."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override ACCOUNT_BOOK_LOG_LEVEL (e.g. INFO, DEBUG)."
    ),
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Write logs to this file instead of stderr."
    ),
) -> None:
    """Start the interactive account book."""
    try:
        settings = get_settings().app
        configure_logging(
            level=log_level or settings.log_level,
            log_file=log_file or settings.log_file,
        )

        if data_file:
            print(f"Using custom data file: {data_file}")

        service = create_ledger_service(data_file=data_file, settings=settings)
        console = LedgerConsole(service, validator=InputValidator(settings))
        exit_code = console.run()
    except Exception as e:
        logger.error("unexpected_error", error=str(e), exc_info=True)
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        raise typer.Exit(code=1)

    raise typer.Exit(code=exit_code)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
