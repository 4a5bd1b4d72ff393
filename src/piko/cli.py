"""CLI interface for Piko."""

import asyncio
from pathlib import Path

from .app import Services, create_services
from .errors import StoreError
from .events import ChatEvent, EventKind
from .models import Session
from .reminders import format_due
from .session import ConversationSession

BANNER = """
╔══════════════════════════════════════════╗
║              🐣 Piko v0.1.0              ║
║      Chat, reminders and images          ║
╚══════════════════════════════════════════╝

Commands:
  /new             - Start a new chat
  /sessions        - List saved chats
  /load <id>       - Switch to a saved chat
  /delete <id>     - Delete a chat and its messages
  /rename <title>  - Rename the current chat
  /reminders       - Show pending reminders
  /image <prompt>  - Generate an image
  /help            - Show this help
  /exit, /quit     - Exit the CLI

Try: "remind me to call mom at 5pm" or "wake me in 30 minutes".
"""

SHORT_ID = 8


class CLI:
    """Interactive command-line interface for Piko."""

    def __init__(self, services: Services | None = None) -> None:
        self.services = services or create_services()
        self.conversation: ConversationSession = self.services.conversation(self._on_event)
        self.images_dir = self.services.config.storage.images_dir
        self._streaming = False

    # ------------------------------------------------------------------
    # Rendering

    def _on_event(self, event: ChatEvent) -> None:
        """Render conversation events as they happen."""
        if event.kind is EventKind.COMPOSING_CHANGED and event.data.get("composing"):
            print("\n… thinking", flush=True)

        elif event.kind is EventKind.IMAGE_REQUESTED:
            print(f"\n🎨 Generating image: {event.data['prompt'] or '(no prompt)'}", flush=True)

        elif event.kind is EventKind.BUSY:
            print(f"\n{event.data['text']}", flush=True)

        elif event.kind is EventKind.MESSAGE_APPENDED:
            message = event.message
            assert message is not None
            if message.is_user:
                return
            if not message.frozen:
                self._streaming = True
                print("\npiko> ", end="", flush=True)
                return
            print(f"\npiko> {message.text}")
            if message.attachment:
                path = self._save_attachment(message.id, message.attachment)
                print(f"      saved to {path}")

        elif event.kind is EventKind.TEXT_UPDATED:
            print(event.data["fragment"], end="", flush=True)

        elif event.kind in (EventKind.COMPLETED, EventKind.FAILED):
            if self._streaming:
                print()
            self._streaming = False

    def _save_attachment(self, message_id: str, data: bytes) -> Path:
        self.images_dir.mkdir(parents=True, exist_ok=True)
        path = self.images_dir / f"{message_id}.png"
        path.write_bytes(data)
        return path

    def _format_session(self, session: Session) -> str:
        marker = "*" if self.conversation.session and session.id == self.conversation.session.id else " "
        created = session.created_at.strftime("%Y-%m-%d %H:%M")
        return f"{marker} {session.id[:SHORT_ID]}  {created}  {session.display_title}"

    def _format_sessions(self) -> str:
        sessions = self.conversation.list_sessions()
        if not sessions:
            return "No saved chats."
        return "\n".join(self._format_session(s) for s in sessions)

    def _format_reminders(self) -> str:
        reminders = self.services.reminders.get_pending()
        if not reminders:
            return "No pending reminders."
        lines = []
        for reminder in reminders:
            due = format_due(reminder.due_at) if reminder.due_at else "no due date"
            lines.append(f"  [{reminder.id}] {reminder.title} ({due})")
        return "\n".join(lines)

    def _resolve_session_id(self, prefix: str) -> str | None:
        matches = [s.id for s in self.conversation.list_sessions() if s.id.startswith(prefix)]
        if len(matches) != 1:
            return None
        return matches[0]

    # ------------------------------------------------------------------
    # Commands

    def _is_command(self, text: str) -> bool:
        lowered = text.lower()
        if lowered.startswith("/image"):
            return False
        return lowered.startswith("/") or lowered in ("exit", "quit")

    async def _handle_command(self, command: str) -> bool:
        """Handle a special command. Returns True if should continue, False to exit."""
        cmd, _, arg = command.strip().partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            return False

        if cmd == "/new":
            session = self.conversation.new_chat()
            print(f"\n✓ New chat {session.id[:SHORT_ID]}")
            return True

        if cmd == "/sessions":
            print(self._format_sessions())
            return True

        if cmd in ("/load", "/delete"):
            session_id = self._resolve_session_id(arg) if arg else None
            if session_id is None:
                print(f"No unique chat matches {arg!r}")
                return True
            if cmd == "/load":
                self._load(session_id)
            else:
                self.conversation.delete_session(session_id)
                print(f"✓ Deleted {session_id[:SHORT_ID]}")
            return True

        if cmd == "/rename":
            if not arg:
                print("Usage: /rename <title>")
                return True
            self.conversation.rename_session(arg)
            print(f"✓ Renamed to {arg!r}")
            return True

        if cmd == "/reminders":
            print(self._format_reminders())
            return True

        if cmd == "/help":
            print(BANNER)
            return True

        print(f"Unknown command: {cmd}. Type /help")
        return True

    def _load(self, session_id: str) -> None:
        try:
            session = self.conversation.load_session(session_id)
        except StoreError as e:
            print(f"❌ {e}")
            return

        print(f"\n── {session.display_title} ──")
        for message in session.messages:
            who = "you" if message.is_user else "piko"
            print(f"{who}> {message.text}")

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        print(f"Backend: {self.services.generator.name}\n")

        try:
            while True:
                try:
                    user_input = (await asyncio.to_thread(input, "you> ")).strip()

                    if not user_input:
                        continue

                    if self._is_command(user_input):
                        if not await self._handle_command(user_input):
                            break
                        continue

                    await self.conversation.submit(user_input)

                except KeyboardInterrupt:
                    print("\n\n⚡ Interrupted")
                    break

                except EOFError:
                    print("\n👋 Goodbye!")
                    break
        finally:
            self.services.close()


async def run_cli() -> None:
    """Run the CLI with configuration from the environment."""
    try:
        services = create_services()
    except ValueError as e:
        print(f"❌ Error: {e}")
        return

    cli = CLI(services)
    await cli.run()
