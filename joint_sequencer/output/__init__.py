"""Output formatting for sequencing results."""

from .formatter import OutputFormatter

__all__ = ["OutputFormatter"]
