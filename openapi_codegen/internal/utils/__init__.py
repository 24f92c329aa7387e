"""Утилиты для генератора"""

from .naming import (
    snake_case,
    pascal_case,
    escape_identifier,
    is_reserved,
)

__all__ = [
    "snake_case",
    "pascal_case",
    "escape_identifier",
    "is_reserved",
]
