# assistant_relay/chat_platform.py
"""
Platform-neutral view of the chat service the bot talks through
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

ChatId = Union[int, str]


@dataclass(frozen=True)
class InboundMessage:
    """An incoming chat update reduced to what the router needs"""
    chat_id: ChatId
    text: Optional[str] = None
    voice_file_id: Optional[str] = None
    message_id: Optional[int] = None

    @property
    def has_voice(self) -> bool:
        return bool(self.voice_file_id)

    @property
    def has_text(self) -> bool:
        return self.text is not None


class ChatPlatform(ABC):
    """Base interface for chat platforms"""

    # Username the bot is addressed by in group chats, when the platform has one
    bot_username: Optional[str] = None

    @abstractmethod
    async def download_voice(self, file_id: str) -> Optional[str]:
        """Download a voice attachment to a local file; None on failure"""
        pass

    @abstractmethod
    async def send_message(self, chat_id: ChatId, text: str) -> None:
        """Send a text message to a chat"""
        pass
