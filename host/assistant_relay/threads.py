# assistant_relay/threads.py
"""
Creation, deletion and per-chat resolution of assistant conversation threads
"""

import logging

from .errors import AssistantServiceError
from .model_providers.base import AssistantProvider
from .session_store import SessionId, SessionStore

logger = logging.getLogger(__name__)


class ThreadManager:
    """Owns the remote lifecycle of conversation threads"""

    def __init__(self, provider: AssistantProvider):
        self.provider = provider

    async def create_thread(self) -> str:
        """Create a thread. ThreadCreationError propagates; there is no retry."""
        thread_id = await self.provider.create_thread()
        logger.info(f"New thread (ID: {thread_id}) created.")
        return thread_id

    async def delete_thread(self, thread_id: str) -> bool:
        """Best-effort delete; a failure only leaks the remote thread"""
        try:
            await self.provider.delete_thread(thread_id)
        except AssistantServiceError as e:
            logger.error(f"Failed to delete thread. {e}")
            return False
        logger.info(f"Old thread (ID: {thread_id}) deleted.")
        return True

    async def resolve_thread(self, session_id: SessionId, store: SessionStore) -> str:
        """Return the session's thread, creating and storing one if it has none"""
        thread_id = store.get(session_id)
        if thread_id:
            return thread_id

        thread_id = await self.create_thread()
        store.set(session_id, thread_id)
        logger.debug(f"Session {session_id} mapped to thread {thread_id}")
        return thread_id
