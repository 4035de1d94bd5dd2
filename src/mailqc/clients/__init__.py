"""Clients for external ticketing systems."""
