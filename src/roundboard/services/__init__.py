# src/roundboard/services/__init__.py

"""Business logic shared by the API and the CLI."""
