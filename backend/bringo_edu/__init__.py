"""Bringo Edu backend: AI lesson plans and Google Drive export."""

__version__ = "2.0.0"
