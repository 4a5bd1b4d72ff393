"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DATA_DIR = Path.home() / ".piko"

PERSONALITY_PROMPT = (
    "You are a helpful, slightly light-hearted and fun assistant. "
    "Keep your responses concise and engaging."
)


@dataclass
class GeneratorConfig:
    """Text generation backend selection.

    backend is one of "mock", "groq", "ollama" or "auto". "auto" uses Groq
    when GROQ_API_KEY is set and falls back to the mock otherwise.
    """

    backend: str = "auto"
    groq_model: str = "llama-3.1-70b-versatile"
    groq_api_key: str | None = None
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    personality: str = PERSONALITY_PROMPT
    thinking_delay: float = 1.0
    typing_delay: float = 0.03


@dataclass
class ChatConfig:
    """Conversation behaviour."""

    title_length: int = 30
    history_limit: int = 20
    single_flight: bool = False


@dataclass
class StorageConfig:
    """Where conversations and reminders are kept."""

    data_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.data_dir is None:
            self.data_dir = DATA_DIR

    @property
    def conversations_db(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "conversations.db"

    @property
    def reminders_db(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "reminders.db"

    @property
    def log_dir(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "logs"

    @property
    def images_dir(self) -> Path:
        assert self.data_dir is not None
        return self.data_dir / "images"


@dataclass
class ImageConfig:
    """Image generation endpoint. No endpoint means images are disabled."""

    endpoint: str | None = None
    api_key: str | None = None
    model: str | None = None
    timeout: float = 120.0


@dataclass
class PikoConfig:
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    image: ImageConfig = field(default_factory=ImageConfig)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def config_from_env() -> PikoConfig:
    """Load configuration from environment variables."""
    generator = GeneratorConfig(
        backend=os.getenv("PIKO_BACKEND", "auto").lower(),
        groq_model=os.getenv("GROQ_MODEL", "llama-3.1-70b-versatile"),
        groq_api_key=os.getenv("GROQ_API_KEY"),
        ollama_host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3.2"),
        personality=os.getenv("PIKO_PERSONALITY", PERSONALITY_PROMPT),
    )

    chat = ChatConfig(
        history_limit=int(os.getenv("PIKO_HISTORY_LIMIT", "20")),
        single_flight=_env_bool("PIKO_SINGLE_FLIGHT"),
    )

    data_dir = os.getenv("PIKO_DATA_DIR")
    storage = StorageConfig(data_dir=Path(data_dir) if data_dir else None)

    image = ImageConfig(
        endpoint=os.getenv("PIKO_IMAGE_ENDPOINT"),
        api_key=os.getenv("PIKO_IMAGE_API_KEY"),
        model=os.getenv("PIKO_IMAGE_MODEL"),
        timeout=float(os.getenv("PIKO_IMAGE_TIMEOUT", "120")),
    )

    return PikoConfig(generator=generator, chat=chat, storage=storage, image=image)
