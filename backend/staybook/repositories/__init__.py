"""Data-access helpers."""
from staybook.repositories import availability_repository

__all__ = ["availability_repository"]
