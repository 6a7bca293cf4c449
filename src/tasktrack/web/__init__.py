"""HTTP API for tasktrack."""

from tasktrack.web.app import create_app

__all__ = ["create_app"]
