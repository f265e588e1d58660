"""Command line interface for payoutschedule."""

from .commands import main

__all__ = ["main"]
