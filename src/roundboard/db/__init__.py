# src/roundboard/db/__init__.py

"""Database models and session management."""
