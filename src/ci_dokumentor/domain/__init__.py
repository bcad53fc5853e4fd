"""Domain layer for ci-dokumentor."""
