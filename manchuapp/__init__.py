"""Manchu Reader: browse, search and translate a Manchu/Latin/English corpus."""

__version__ = "0.1.0"
