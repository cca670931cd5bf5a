# assistant_relay/model_providers/base.py
"""
Base interfaces for model providers
"""

from abc import ABC, abstractmethod
from typing import Any, List


class TranscriptionProvider(ABC):
    """Base interface for speech-to-text providers"""

    @abstractmethod
    async def transcribe(self, audio_path: str, **kwargs) -> str:
        """Transcribe an audio file to text"""
        pass


class AssistantProvider(ABC):
    """Base interface for hosted assistants with server-side threads and runs"""

    @abstractmethod
    async def create_thread(self) -> str:
        """Allocate a conversation thread and return its id"""
        pass

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> None:
        """Delete a conversation thread"""
        pass

    @abstractmethod
    async def create_message(self, thread_id: str, text: str) -> None:
        """Append a user message to the thread"""
        pass

    @abstractmethod
    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        """Start a run of the assistant on the thread and return the run id"""
        pass

    @abstractmethod
    async def retrieve_run_status(self, thread_id: str, run_id: str) -> str:
        """Return the current status string of a run"""
        pass

    @abstractmethod
    async def latest_message_content(self, thread_id: str) -> List[Any]:
        """Return the content parts of the newest message in the thread"""
        pass
