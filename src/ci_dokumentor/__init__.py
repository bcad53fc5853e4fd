"""ci-dokumentor: README synchronisation for CI/CD manifests."""

__all__ = ["__version__"]

__version__ = "0.1.0"
