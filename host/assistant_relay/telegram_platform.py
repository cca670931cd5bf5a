# assistant_relay/telegram_platform.py
"""
Telegram adapter built on python-telegram-bot: converts updates, downloads
voice notes, sends replies and wires the application's handlers.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from .chat_platform import ChatId, ChatPlatform, InboundMessage
from .config import Config
from .errors import RequestError

logger = logging.getLogger(__name__)

TELEGRAM_LIMIT = 4096


def split_message(text: str, limit: int = TELEGRAM_LIMIT) -> List[str]:
    """Split text into chunks Telegram accepts, preferring line breaks"""
    chunks: List[str] = []
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(remaining[:cut])
        remaining = remaining[cut:].lstrip("\n")
    if remaining:
        chunks.append(remaining)
    return chunks


def to_inbound_message(update: Update) -> Optional[InboundMessage]:
    """Reduce a Telegram update to an InboundMessage; None for other update kinds"""
    message = update.message
    if message is None:
        return None
    voice_file_id = message.voice.file_id if message.voice else None
    return InboundMessage(
        chat_id=message.chat_id,
        text=message.text,
        voice_file_id=voice_file_id,
        message_id=message.message_id,
    )


class TelegramChatPlatform(ChatPlatform):
    """ChatPlatform backed by a python-telegram-bot Bot"""

    def __init__(self, bot: Bot, download_dir: str):
        self.bot = bot
        self.download_dir = download_dir

    @property
    def bot_username(self) -> Optional[str]:
        # Known once the application has called get_me during initialization
        try:
            return self.bot.username
        except RuntimeError:
            return None

    async def download_voice(self, file_id: str) -> Optional[str]:
        file_path = os.path.join(self.download_dir, f"{file_id}.ogg")
        try:
            os.makedirs(self.download_dir, exist_ok=True)
            tg_file = await self.bot.get_file(file_id)
            await tg_file.download_to_drive(custom_path=file_path)
        except (TelegramError, OSError) as e:
            logger.error(f"Failed to download voice file {file_id}: {e}")
            return None
        return file_path

    async def send_message(self, chat_id: ChatId, text: str) -> None:
        for chunk in split_message(text):
            await self.bot.send_message(chat_id=chat_id, text=chunk)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log failures of a single update; the bot keeps polling"""
    error = context.error
    chat = getattr(getattr(update, "effective_chat", None), "id", None)
    if isinstance(error, RequestError):
        logger.error(f"Request failed for chat {chat}: {error}")
    else:
        logger.error(f"Unhandled error for chat {chat}", exc_info=error)


def build_application(config: Config) -> Application:
    """Create the Telegram application; handlers are added by register_router"""
    return (
        Application.builder()
        .token(config.telegram_token)
        .concurrent_updates(config.concurrent_updates)
        .build()
    )


def register_router(application: Application, handle: Callable) -> None:
    """Route text and voice messages to `handle(InboundMessage)`"""

    async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = to_inbound_message(update)
        if message is None:
            return
        await handle(message)

    application.add_handler(MessageHandler(filters.TEXT | filters.VOICE, on_message))
    application.add_error_handler(on_error)
