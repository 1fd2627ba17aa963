"""Adapters for bulk sources of item types."""

from .thing_reader import ThingExportReader

__all__ = ["ThingExportReader"]
