"""NASA data proxy web application."""

from .app import build_reconciler, create_app, create_blueprint

__all__ = ["build_reconciler", "create_app", "create_blueprint"]
