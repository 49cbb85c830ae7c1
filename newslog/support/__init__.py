"""Display helpers."""

from .timefmt import relative_to_now

__all__ = ["relative_to_now"]
