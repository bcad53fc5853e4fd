"""Ports implemented by ci-dokumentor adapters."""
