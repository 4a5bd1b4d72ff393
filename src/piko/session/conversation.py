"""Conversation orchestration: classify input, dispatch, keep history."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from ..config import ChatConfig
from ..errors import GenerationError, ImageGenerationCancelled, ReminderError, StoreError
from ..events import ChatEvent, EventKind, Listener, ignore
from ..generation import TextGenerator
from ..images import ImagePlayground, NullImagePlayground
from ..logging import JSONLLogger, get_logger
from ..models import Message, Session
from ..reminders import ReminderService, format_due
from ..router import (
    AlarmCommand,
    Command,
    ImageRequestCommand,
    PlainChatCommand,
    ReminderCommand,
    classify,
)
from ..store import ConversationStore
from ..streaming import ResponseStreamer

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "⏳ Still working on the last reply. Give me a moment."
ALARM_UNPARSED_MESSAGE = (
    "❌ I couldn't understand the time. Try: 'Set alarm for 7am' or 'Wake me in 30 minutes'"
)
ALARM_UNAVAILABLE_MESSAGE = "⏰ Alarm functionality is not available. The requested time was: {time}"
IMAGE_READY_MESSAGE = "Here's your image!"
GENERATION_ERROR_MESSAGE = "Sorry, I encountered an error: {error}"


class State(Enum):
    """Where the conversation is in handling the latest input."""

    IDLE = "idle"
    CLASSIFYING = "classifying"
    REMINDER = "reminder"
    ALARM = "alarm"
    IMAGE = "image"
    CHAT = "chat"


def command_name(command: Command) -> str:
    return {
        ReminderCommand: "reminder",
        AlarmCommand: "alarm",
        ImageRequestCommand: "image",
        PlainChatCommand: "chat",
    }[type(command)]


class ConversationSession:
    """Turns raw user input into conversation history.

    Every collaborator is injected. No collaborator failure propagates out
    of :meth:`submit`: each becomes an assistant message, or is dropped when
    an image request is cancelled.

    Overlapping submits are allowed unless ``config.single_flight`` is set.
    When they overlap, replies are appended in completion order.
    """

    def __init__(
        self,
        store: ConversationStore,
        generator: TextGenerator,
        reminders: ReminderService,
        images: ImagePlayground | None = None,
        config: ChatConfig | None = None,
        listener: Listener | None = None,
        json_logger: JSONLLogger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.generator = generator
        self.reminders = reminders
        self.images = images or NullImagePlayground()
        self.config = config or ChatConfig()
        self.listener = listener or ignore
        self.json_logger = json_logger or get_logger()
        self.clock = clock or datetime.now

        self.session: Session | None = None
        self.state = State.IDLE
        self.composing = False
        self.pending_image_prompt: str | None = None
        self._in_flight = 0
        self._streamer = ResponseStreamer(self._emit)

    # ------------------------------------------------------------------
    # Events

    def _emit(self, event: ChatEvent) -> None:
        self.listener(event)

    def _notify(self, kind: EventKind, message: Message | None = None, **data) -> None:
        self._emit(ChatEvent(kind=kind, message=message, data=data))

    def _set_composing(self, composing: bool) -> None:
        if self.composing != composing:
            self.composing = composing
            self._notify(EventKind.COMPOSING_CHANGED, composing=composing)

    @property
    def busy(self) -> bool:
        """Whether a submit is still being handled."""
        return self._in_flight > 0

    # ------------------------------------------------------------------
    # Session management

    @property
    def messages(self) -> list[Message]:
        return list(self.session.messages) if self.session else []

    def new_chat(self) -> Session:
        """Start a fresh session and make it active."""
        self.session = self.store.create_session()
        self.json_logger.log("session_start", session_id=self.session.id)
        self._notify(EventKind.SESSION_CREATED, session_id=self.session.id)
        return self.session

    def _ensure_session(self) -> Session:
        if self.session is None:
            return self.new_chat()
        return self.session

    def load_session(self, session_id: str) -> Session:
        """Make a stored session active, with messages in time order.

        Raises:
            StoreError: If no such session exists.
        """
        session = self.store.get_session(session_id)
        if session is None:
            raise StoreError(f"Session not found: {session_id}")
        session.messages = session.sorted_messages()
        self.session = session
        return session

    def list_sessions(self) -> list[Session]:
        return self.store.list_sessions()

    def rename_session(self, title: str) -> None:
        """Set an explicit title on the active session."""
        session = self._ensure_session()
        self.store.rename_session(session, title)
        self._notify(EventKind.TITLE_CHANGED, session_id=session.id, title=title)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its messages.

        Deleting the active session leaves no session active; the next
        submit creates a new one.
        """
        deleted = self.store.delete_session(session_id)
        if not deleted:
            return False

        if self.session is not None and self.session.id == session_id:
            self.session = None
        self.json_logger.log("session_deleted", session_id=session_id)
        self._notify(EventKind.SESSION_DELETED, session_id=session_id)
        return True

    def _append(self, session: Session, message: Message) -> Message:
        self.store.add_message(session, message)
        self._notify(EventKind.MESSAGE_APPENDED, message)
        return message

    def _reply(self, session: Session, text: str, attachment: bytes | None = None) -> Message:
        return self._append(session, Message.assistant(text, attachment=attachment))

    def _derive_title(self, session: Session, raw_text: str) -> None:
        if session.title is not None or session.user_message_count != 1:
            return
        title = raw_text.strip()[: self.config.title_length]
        self.store.rename_session(session, title)
        self._notify(EventKind.TITLE_CHANGED, session_id=session.id, title=title)

    # ------------------------------------------------------------------
    # Submit

    async def submit(self, raw_text: str) -> Command | None:
        """Handle one piece of user input.

        The user message is stored and classified before anything is
        awaited, so it always precedes its reply.

        Returns:
            The command the input was classified as, or None when the
            input was blank or rejected as busy.
        """
        if not raw_text.strip():
            return None

        if self.config.single_flight and self.busy:
            self._notify(EventKind.BUSY, text=BUSY_MESSAGE)
            return None

        session = self._ensure_session()
        self.state = State.CLASSIFYING
        self._append(session, Message.user(raw_text))

        command = classify(raw_text, now=self.clock())
        self._derive_title(session, raw_text)
        self.json_logger.log_command(
            command_name(command),
            session_id=session.id,
            message_length=len(raw_text),
        )

        self._in_flight += 1
        try:
            if isinstance(command, ReminderCommand):
                self.state = State.REMINDER
                await self._handle_reminder(session, command)
            elif isinstance(command, AlarmCommand):
                self.state = State.ALARM
                self._handle_alarm(session, command)
            elif isinstance(command, ImageRequestCommand):
                self.state = State.IMAGE
                await self._handle_image(session, command)
            else:
                self.state = State.CHAT
                await self._handle_chat(session, command)
        finally:
            self._in_flight -= 1
            self.state = State.IDLE

        return command

    async def _handle_reminder(self, session: Session, command: ReminderCommand) -> None:
        self._set_composing(True)
        try:
            confirmation = await self.reminders.create(command.title, command.due_at)
        except Exception as e:
            if not isinstance(e, ReminderError):
                logger.exception("Unexpected reminder failure")
            self._set_composing(False)
            self.json_logger.log("reminder_failed", session_id=session.id, error=str(e))
            self._reply(session, f"❌ {e}")
            return

        self._set_composing(False)
        self.json_logger.log(
            "reminder_created",
            session_id=session.id,
            due_at=command.due_at.isoformat() if command.due_at else None,
        )
        self._reply(session, confirmation)

    def _handle_alarm(self, session: Session, command: AlarmCommand) -> None:
        if command.at is None:
            self.json_logger.log("alarm_unparsed", session_id=session.id)
            self._reply(session, ALARM_UNPARSED_MESSAGE)
            return

        # No alarm backend: echo the parsed time.
        self._reply(session, ALARM_UNAVAILABLE_MESSAGE.format(time=format_due(command.at)))

    async def _handle_image(self, session: Session, command: ImageRequestCommand) -> None:
        self.pending_image_prompt = command.prompt
        self.json_logger.log("image_requested", session_id=session.id)
        self._notify(EventKind.IMAGE_REQUESTED, prompt=command.prompt)

        try:
            data = await self.images.generate(command.prompt)
        except ImageGenerationCancelled:
            data = None
        except Exception:
            logger.exception("Image generation failed")
            data = None
        finally:
            self.pending_image_prompt = None

        if data is None:
            self.json_logger.log("image_cancelled", session_id=session.id)
            return

        self._reply(session, IMAGE_READY_MESSAGE, attachment=data)

    async def _handle_chat(self, session: Session, command: PlainChatCommand) -> None:
        history = session.history(limit=self.config.history_limit, exclude_last=True)
        started = time.perf_counter()

        self._set_composing(True)
        try:
            source = await self.generator.generate(command.text, history)
        except Exception as e:
            if not isinstance(e, GenerationError):
                logger.exception("Unexpected failure from %s", self.generator.name)
            self._set_composing(False)
            self.json_logger.log(
                "generation_failed",
                session_id=session.id,
                backend=self.generator.name,
                error=str(e),
            )
            self._reply(session, GENERATION_ERROR_MESSAGE.format(error=e))
            return

        reply = self._append(session, Message.placeholder())
        self._set_composing(False)

        result = await self._streamer.stream(source, reply)
        duration_ms = (time.perf_counter() - started) * 1000

        self.json_logger.log_stream(
            self.generator.name,
            result.fragments,
            result.words,
            duration_ms,
            session_id=session.id,
            error=str(result.error) if result.error else None,
        )

        if result.ok:
            self.store.save_message(reply)
            return

        if reply.text:
            self.store.save_message(reply)
        else:
            self.store.delete_message(session, reply)
        self._reply(session, GENERATION_ERROR_MESSAGE.format(error=result.error))
