"""Bundled data files (template catalog)."""
