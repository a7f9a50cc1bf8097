"""hostfacts CLI."""

from hostfacts.cli.app import app

__all__ = ["app"]
