"""Adapters: formatters, renderers, migration tools and CI/CD platforms."""
