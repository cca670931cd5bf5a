# assistant_relay/router.py
"""
MessageRouter sends each inbound message down the voice or text path,
handles the restart command and relays assistant replies back to the chat.
"""

from __future__ import annotations

import logging
from typing import Optional

from .chat_platform import ChatPlatform, InboundMessage
from .command_handler import CommandHandler
from .model_providers.base import TranscriptionProvider
from .runs import RunOrchestrator
from .session_store import SessionStore
from .speech import transcribe_voice
from .threads import ThreadManager

log = logging.getLogger(__name__)


class MessageRouter:
    """Dispatches inbound messages; one call per update."""

    def __init__(
        self,
        platform: ChatPlatform,
        store: SessionStore,
        threads: ThreadManager,
        orchestrator: RunOrchestrator,
        transcriber: TranscriptionProvider,
        restart_command: str = "/restart",
    ) -> None:
        self.platform = platform
        self.store = store
        self.threads = threads
        self.orchestrator = orchestrator
        self.transcriber = transcriber
        self.commands = CommandHandler(store, threads, restart_command)

    async def handle(self, message: InboundMessage) -> Optional[str]:
        """Process one message. Returns the reply sent, or None when nothing was sent."""
        if message.has_voice:
            text = await self.voice_to_text(message)
            if text is None:
                return None
            return await self.handle_text(message.chat_id, text)

        if message.has_text:
            return await self.handle_text(message.chat_id, message.text)

        log.debug(f"Ignoring update without text or voice from chat {message.chat_id}")
        return None

    async def voice_to_text(self, message: InboundMessage) -> Optional[str]:
        audio_path = await self.platform.download_voice(message.voice_file_id)
        if audio_path is None:
            log.warning(f"Voice download failed for chat {message.chat_id}; skipping")
            return None

        text = await transcribe_voice(audio_path, self.transcriber)
        if text is None:
            log.warning(f"Transcription failed for chat {message.chat_id}; skipping")
        return text

    async def handle_text(self, chat_id, text: str) -> Optional[str]:
        if await self.commands.handle(chat_id, text, bot_username=self.platform.bot_username):
            return None

        thread_id = await self.threads.resolve_thread(chat_id, self.store)
        reply = await self.orchestrator.run_message(thread_id, text)
        if not reply:
            log.warning(f"Assistant returned an empty reply for chat {chat_id}")
            return None

        await self.platform.send_message(chat_id, reply)
        return reply
