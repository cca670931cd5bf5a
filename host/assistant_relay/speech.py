# assistant_relay/speech.py
"""
Speech-to-text for voice messages
"""

import logging
import os
from typing import Optional

from .model_providers.base import TranscriptionProvider

logger = logging.getLogger(__name__)


async def transcribe_voice(
    audio_path: str,
    provider: TranscriptionProvider,
    keep_file: bool = False,
) -> Optional[str]:
    """Transcribe a downloaded voice file.

    Returns None on any failure or an empty transcript; the caller then drops
    the message without replying.
    """
    try:
        text = await provider.transcribe(audio_path)
    except Exception as e:
        logger.error(f"STT error for {audio_path}: {e}")
        return None
    finally:
        if not keep_file:
            try:
                os.remove(audio_path)
            except OSError as e:
                logger.debug(f"Could not remove voice file {audio_path}: {e}")

    if not text or not text.strip():
        logger.info("Empty transcription, ignoring")
        return None

    text = text.strip()
    logger.info(f"Valid transcription: {text[:100]}...")
    return text
