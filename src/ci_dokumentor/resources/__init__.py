"""Packaged resources for ci-dokumentor (JSON schemas)."""
