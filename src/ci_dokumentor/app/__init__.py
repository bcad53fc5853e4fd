"""Application services for ci-dokumentor."""
