"""Dashboard routes."""

from .pediatric_reference import pediatric_reference_bp

__all__ = [
    "pediatric_reference_bp",
]
