"""Retail inventory catalog with spreadsheet import, relevance search and price quotes."""

__version__ = "0.3.0"
