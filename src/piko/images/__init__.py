"""Image generation."""

from .playground import HttpImagePlayground, ImagePlayground, NullImagePlayground

__all__ = ["HttpImagePlayground", "ImagePlayground", "NullImagePlayground"]
