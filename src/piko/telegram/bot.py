"""Telegram bot integration for Piko."""

import asyncio
import logging
import os
import time
from dataclasses import dataclass

from telegram import Bot, Update
from telegram.constants import ChatAction, ParseMode
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..app import Services, create_services
from ..events import ChatEvent, EventKind
from ..reminders import format_due
from ..session import ConversationSession

logger = logging.getLogger(__name__)


WELCOME_MESSAGE = """
🐣 *Piko*

Chat with me, or ask for something specific:

• _remind me to call mom at 5pm_
• _wake me in 30 minutes_
• _/image a cat wearing a tiny hat_

*Commands:*
/start - Show this message
/new - Start a new chat
/reminders - Show pending reminders
"""

MAX_MESSAGE_LENGTH = 4096
EDIT_INTERVAL = 1.0
STREAM_PLACEHOLDER = "…"


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to fit Telegram limits."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 20] + "\n... [truncated]"


@dataclass
class StreamingReply:
    """Telegram message a streamed reply is being edited into."""

    message_id: int
    last_edit: float


class ChatRenderer:
    """Replays conversation events into one Telegram chat.

    The conversation calls the renderer synchronously; events are queued
    and a background task performs the Telegram calls in order. Each
    streamed reply gets its own Telegram message, edited in place at most
    once per ``edit_interval``, so overlapping replies never share one.
    """

    def __init__(self, bot: Bot, chat_id: int | str, edit_interval: float = EDIT_INTERVAL) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.edit_interval = edit_interval
        self.queue: asyncio.Queue[ChatEvent | None] = asyncio.Queue()
        self._streams: dict[str, StreamingReply] = {}
        self._task: asyncio.Task | None = None

    def __call__(self, event: ChatEvent) -> None:
        self.queue.put_nowait(event)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self.queue.put_nowait(None)
            await self._task

    async def run(self) -> None:
        while True:
            event = await self.queue.get()
            if event is None:
                break
            try:
                await self.render(event)
            except TelegramError as e:
                logger.warning("Telegram call failed for chat %s: %s", self.chat_id, e)

    async def render(self, event: ChatEvent) -> None:
        if event.kind is EventKind.COMPOSING_CHANGED and event.data.get("composing"):
            await self.bot.send_chat_action(self.chat_id, ChatAction.TYPING)

        elif event.kind is EventKind.IMAGE_REQUESTED:
            await self.bot.send_chat_action(self.chat_id, ChatAction.UPLOAD_PHOTO)

        elif event.kind is EventKind.BUSY:
            await self.bot.send_message(self.chat_id, event.data["text"])

        elif event.kind is EventKind.MESSAGE_APPENDED:
            message = event.message
            assert message is not None
            if message.is_user:
                return
            if message.attachment:
                await self.bot.send_photo(self.chat_id, photo=message.attachment, caption=message.text)
            elif not message.frozen:
                sent = await self.bot.send_message(self.chat_id, STREAM_PLACEHOLDER)
                self._streams[message.id] = StreamingReply(sent.message_id, time.monotonic())
            else:
                await self.bot.send_message(self.chat_id, truncate_message(message.text))

        elif event.kind is EventKind.TEXT_UPDATED:
            assert event.message is not None
            stream = self._streams.get(event.message.id)
            if stream and time.monotonic() - stream.last_edit >= self.edit_interval:
                await self._edit(stream, event.message.text)

        elif event.kind in (EventKind.COMPLETED, EventKind.FAILED):
            assert event.message is not None
            stream = self._streams.pop(event.message.id, None)
            if stream is None:
                return
            if event.message.text:
                await self._edit(stream, event.message.text)
            else:
                await self.bot.delete_message(self.chat_id, stream.message_id)

    async def _edit(self, stream: StreamingReply, text: str) -> None:
        stream.last_edit = time.monotonic()
        await self.bot.edit_message_text(
            truncate_message(text),
            chat_id=self.chat_id,
            message_id=stream.message_id,
        )


@dataclass
class ChatState:
    """Per-chat conversation and renderer."""

    conversation: ConversationSession
    renderer: ChatRenderer


class TelegramBot:
    """Telegram bot for Piko."""

    def __init__(
        self,
        token: str | None = None,
        services: Services | None = None,
    ) -> None:
        self.token = token or os.getenv("TELEGRAM_TOKEN")
        if not self.token:
            raise ValueError("TELEGRAM_TOKEN not set")

        self.services = services or create_services()
        self.json_logger = self.services.json_logger
        self._chats: dict[str, ChatState] = {}
        self._app: Application | None = None

    def _get_chat_id(self, update: Update) -> str:
        """Get chat_id as string from update."""
        assert update.effective_chat is not None
        return str(update.effective_chat.id)

    def get_chat(self, chat_id: str, bot: Bot) -> ChatState:
        """Get or create the conversation for a chat."""
        if chat_id not in self._chats:
            renderer = ChatRenderer(bot, chat_id)
            conversation = self.services.conversation(renderer)
            self._chats[chat_id] = ChatState(conversation=conversation, renderer=renderer)
        state = self._chats[chat_id]
        state.renderer.start()
        return state

    async def _handle_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /start command."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)

        self.json_logger.log("telegram_start", chat_id=chat_id)

        await update.message.reply_text(WELCOME_MESSAGE, parse_mode=ParseMode.MARKDOWN)

    async def _handle_new(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /new command."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)

        state = self.get_chat(chat_id, context.bot)
        session = state.conversation.new_chat()
        self.json_logger.log("telegram_new_chat", session_id=session.id, chat_id=chat_id)

        await update.message.reply_text("✨ New chat started.")

    async def _handle_reminders(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /reminders command."""
        assert update.message is not None
        reminders = self.services.reminders.get_pending()
        if not reminders:
            await update.message.reply_text("No pending reminders.")
            return

        lines = [
            f"• {r.title} ({format_due(r.due_at) if r.due_at else 'no due date'})"
            for r in reminders
        ]
        await update.message.reply_text(truncate_message("\n".join(lines)))

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle incoming messages."""
        assert update.message is not None
        assert update.message.text is not None

        chat_id = self._get_chat_id(update)
        state = self.get_chat(chat_id, context.bot)

        self.json_logger.log(
            "telegram_message",
            chat_id=chat_id,
            message_length=len(update.message.text),
        )
        await state.conversation.submit(update.message.text)

    async def _post_shutdown(self, application: Application) -> None:
        """Called after Application.shutdown()."""
        for state in self._chats.values():
            await state.renderer.stop()
        self.services.close()

    def build_app(self) -> Application:
        """Build the Telegram application."""
        self._app = (
            Application.builder()
            .token(self.token)
            .concurrent_updates(True)
            .post_shutdown(self._post_shutdown)
            .build()
        )

        self._app.add_handler(CommandHandler("start", self._handle_start))
        self._app.add_handler(CommandHandler("new", self._handle_new))
        self._app.add_handler(CommandHandler("reminders", self._handle_reminders))
        self._app.add_handler(CommandHandler("image", self._handle_message))
        self._app.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message)
        )

        return self._app

    def run(self) -> None:
        """Run the bot (blocking)."""
        app = self.build_app()

        logger.info("Starting Telegram bot with %s generator...", self.services.generator.name)
        app.run_polling()
