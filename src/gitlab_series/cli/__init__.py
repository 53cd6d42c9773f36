"""Command line interface for gitlab-series."""
