# src/roundboard/__init__.py

"""Roundboard: leaderboard and round tracking backend."""

__version__ = "0.1.0"
