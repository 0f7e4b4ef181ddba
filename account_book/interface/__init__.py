"""Text interface package."""

from account_book.interface.console import (
    ConsoleClosed,
    LedgerConsole,
    render_entries,
)

__all__ = ["ConsoleClosed", "LedgerConsole", "render_entries"]
