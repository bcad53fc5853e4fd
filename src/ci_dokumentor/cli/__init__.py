"""CLI package for ci-dokumentor."""
