"""Hole plan pipeline stages."""
