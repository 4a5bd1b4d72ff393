"""Telegram bot integration."""

from .bot import ChatRenderer, TelegramBot

__all__ = ["ChatRenderer", "TelegramBot"]
