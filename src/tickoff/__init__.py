"""Recurring checklists with a background reset engine."""

__version__ = "0.1.0"
