"""Allow `python -m account_book [DATA_FILE]`."""

from account_book.cli import run

run()
