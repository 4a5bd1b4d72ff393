"""Text generation backends."""

from .base import TextGenerator, build_messages
from .factory import create_generator
from .fallback import FallbackGenerator
from .hosted import GroqGenerator
from .local import OllamaGenerator
from .mock import MockGenerator

__all__ = [
    "FallbackGenerator",
    "GroqGenerator",
    "MockGenerator",
    "OllamaGenerator",
    "TextGenerator",
    "build_messages",
    "create_generator",
]
