"""Infrastructure layer implementations."""

from src.infrastructure import pdf, storage

__all__ = ["storage", "pdf"]
