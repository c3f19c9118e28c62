"""Command-line interface for sqlnaming (``sqlnaming`` console script)."""

from sqlnaming.cli.app import app

__all__ = ["app"]
