"""Bitbucket commit history to Google Sheets sync."""

__version__ = "0.1.0"
