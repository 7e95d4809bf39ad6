"""API route handlers."""

from api.routes import capabilities, health, verify

__all__ = ["capabilities", "health", "verify"]
