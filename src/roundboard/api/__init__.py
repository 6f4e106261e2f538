# src/roundboard/api/__init__.py

"""HTTP routers."""
