"""Endpoint modules, one per remote service."""
