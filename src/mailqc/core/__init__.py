"""Configuration and review workflow."""
