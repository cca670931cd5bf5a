"""
OpenAI implementation of model providers
"""

import asyncio
import logging
from typing import Any, List

from openai import AsyncOpenAI, NotFoundError, OpenAI, OpenAIError

from ..errors import AssistantServiceError, ThreadCreationError
from .base import AssistantProvider, TranscriptionProvider

logger = logging.getLogger(__name__)


class OpenAITranscriptionProvider(TranscriptionProvider):
    """OpenAI Whisper API implementation"""

    def __init__(self, api_key: str, model: str = "whisper-1"):
        self.client = OpenAI(api_key=api_key)
        self.model = model

    async def transcribe(self, audio_path: str, **kwargs) -> str:
        """Transcribe an audio file using OpenAI Whisper"""
        loop = asyncio.get_event_loop()

        def _transcribe():
            params = {"model": self.model, **kwargs}
            with open(audio_path, "rb") as audio_file:
                response = self.client.audio.transcriptions.create(file=audio_file, **params)
            return response.text.strip()

        return await loop.run_in_executor(None, _transcribe)


class OpenAIAssistantProvider(AssistantProvider):
    """OpenAI Assistants API (threads, messages, runs) implementation"""

    def __init__(self, api_key: str, client: AsyncOpenAI = None):
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def create_thread(self) -> str:
        try:
            thread = await self.client.beta.threads.create()
        except OpenAIError as e:
            raise ThreadCreationError(f"Failed to create thread: {e}") from e
        return thread.id

    async def delete_thread(self, thread_id: str) -> None:
        try:
            await self.client.beta.threads.delete(thread_id)
        except OpenAIError as e:
            raise AssistantServiceError(f"Failed to delete thread {thread_id}: {e}") from e

    async def create_message(self, thread_id: str, text: str) -> None:
        try:
            await self.client.beta.threads.messages.create(thread_id, role="user", content=text)
        except NotFoundError as e:
            # The mapping outlived the remote thread
            raise AssistantServiceError(f"Thread {thread_id} no longer exists: {e}") from e
        except OpenAIError as e:
            raise AssistantServiceError(f"Failed to add message to thread {thread_id}: {e}") from e

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        try:
            run = await self.client.beta.threads.runs.create(thread_id, assistant_id=assistant_id)
        except OpenAIError as e:
            raise AssistantServiceError(f"Failed to start run on thread {thread_id}: {e}") from e
        return run.id

    async def retrieve_run_status(self, thread_id: str, run_id: str) -> str:
        try:
            run = await self.client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        except OpenAIError as e:
            raise AssistantServiceError(f"Failed to retrieve run {run_id}: {e}") from e
        return run.status

    async def latest_message_content(self, thread_id: str) -> List[Any]:
        try:
            page = await self.client.beta.threads.messages.list(thread_id, limit=1, order="desc")
        except OpenAIError as e:
            raise AssistantServiceError(f"Failed to list messages of thread {thread_id}: {e}") from e
        if not page.data:
            return []
        return list(page.data[0].content)
