"""Click commands for ghsync."""

from .sync import sync_handler

__all__ = ['sync_handler']
