"""Wire collaborators together from configuration."""

import logging
from dataclasses import dataclass

from .config import PikoConfig, config_from_env
from .events import Listener
from .generation import TextGenerator, create_generator
from .images import HttpImagePlayground, ImagePlayground, NullImagePlayground
from .logging import JSONLLogger, configure_logger
from .reminders import ReminderStore
from .session import ConversationSession
from .store import SQLiteConversationStore

logger = logging.getLogger(__name__)


def create_image_playground(config: PikoConfig) -> ImagePlayground:
    if not config.image.endpoint:
        return NullImagePlayground()
    return HttpImagePlayground(
        config.image.endpoint,
        api_key=config.image.api_key,
        model=config.image.model,
        timeout=config.image.timeout,
    )


@dataclass
class Services:
    """Shared collaborators. Conversations share these but nothing else."""

    config: PikoConfig
    store: SQLiteConversationStore
    reminders: ReminderStore
    generator: TextGenerator
    images: ImagePlayground
    json_logger: JSONLLogger

    def conversation(self, listener: Listener | None = None) -> ConversationSession:
        """Create a new conversation bound to these services."""
        return ConversationSession(
            self.store,
            self.generator,
            self.reminders,
            images=self.images,
            config=self.config.chat,
            listener=listener,
            json_logger=self.json_logger,
        )

    def close(self) -> None:
        self.store.close()
        self.reminders.close()


def create_services(config: PikoConfig | None = None) -> Services:
    """Build every collaborator once, at startup.

    Raises:
        ValueError: If the generator configuration is invalid.
    """
    config = config or config_from_env()

    generator = create_generator(config.generator)
    logger.info("Using %s generator", generator.name)

    store = SQLiteConversationStore(config.storage.conversations_db)
    store.init_db()

    reminders = ReminderStore(config.storage.reminders_db)
    reminders.init_db()

    return Services(
        config=config,
        store=store,
        reminders=reminders,
        generator=generator,
        images=create_image_playground(config),
        json_logger=configure_logger(config.storage.log_dir),
    )
