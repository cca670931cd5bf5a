"""Encapsulates the bot's reserved chat commands (currently only restart)."""

import logging
from typing import Optional

from .session_store import SessionId, SessionStore
from .threads import ThreadManager

log = logging.getLogger(__name__)


class CommandHandler:
    def __init__(self, store: SessionStore, threads: ThreadManager, restart_command: str = "/restart"):
        self.store = store
        self.threads = threads
        self.restart_command = restart_command

    def is_command(self, text: str, bot_username: Optional[str] = None) -> bool:
        """Exact match only; '/restart@name' counts when name is this bot"""
        text = text.strip()
        if text == self.restart_command:
            return True
        return bool(bot_username) and text == f"{self.restart_command}@{bot_username}"

    async def handle(self, session_id: SessionId, text: str, bot_username: Optional[str] = None) -> bool:
        """Returns True iff the input was a handled command."""
        if not self.is_command(text, bot_username):
            return False

        # ---- Restart conversation ----
        await self.restart(session_id)
        return True

    async def restart(self, session_id: SessionId) -> None:
        """Drop the session's thread so the next message starts a fresh one"""
        thread_id = self.store.get(session_id)
        if thread_id:
            await self.threads.delete_thread(thread_id)
        self.store.delete(session_id)
        log.info(f"Session {session_id} restarted (thread: {thread_id or 'none'})")
