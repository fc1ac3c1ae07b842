"""API route handlers."""

from src.api.openapi.routes import health, workout_logs

__all__ = [
    "health",
    "workout_logs",
]
