"""Text formatting utilities for pmap documents."""

from .inline import process_inline_markup

__all__ = [
    "process_inline_markup",
]
