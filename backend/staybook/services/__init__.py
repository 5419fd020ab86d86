"""Service layer exports."""
from staybook.services import (
    availability_service,
    override_service,
)

__all__ = [
    "availability_service",
    "override_service",
]
