"""Utility helpers (configuration loading, telemetry)."""
