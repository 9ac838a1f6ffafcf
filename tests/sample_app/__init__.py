"""Importable controllers used by the resolver and dispatcher tests."""
