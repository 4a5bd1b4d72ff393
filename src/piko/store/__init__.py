"""Conversation stores."""

from .base import ConversationStore
from .memory import InMemoryConversationStore
from .sqlite import SQLiteConversationStore

__all__ = ["ConversationStore", "InMemoryConversationStore", "SQLiteConversationStore"]
