"""Pick the generation backend once at startup."""

import logging

from groq import AsyncGroq

from ..config import GeneratorConfig
from .base import TextGenerator
from .fallback import FallbackGenerator
from .hosted import GroqGenerator
from .local import OllamaGenerator
from .mock import MockGenerator

logger = logging.getLogger(__name__)

BACKENDS = ("auto", "mock", "groq", "ollama")


def create_generator(config: GeneratorConfig | None = None) -> TextGenerator:
    """Build the configured TextGenerator.

    Raises:
        ValueError: If the backend name is unknown, or "groq" is requested
            without an API key.
    """
    config = config or GeneratorConfig()
    backend = config.backend

    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend!r}. Choose one of {', '.join(BACKENDS)}")

    mock = MockGenerator(
        thinking_delay=config.thinking_delay,
        typing_delay=config.typing_delay,
    )

    if backend == "mock":
        return mock

    if backend == "ollama":
        return OllamaGenerator(
            host=config.ollama_host,
            model=config.ollama_model,
            system=config.personality,
        )

    if not config.groq_api_key:
        if backend == "groq":
            raise ValueError("GROQ_API_KEY not set")
        logger.info("GROQ_API_KEY not set, using mock generator")
        return mock

    groq = GroqGenerator(
        AsyncGroq(api_key=config.groq_api_key),
        model=config.groq_model,
        system=config.personality,
    )
    if backend == "groq":
        return groq
    return FallbackGenerator(groq, mock)
