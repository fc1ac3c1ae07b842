"""Infrastructure layer - external service implementations."""

from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

__all__ = [
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
]
