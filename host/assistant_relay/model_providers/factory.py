# assistant_relay/model_providers/factory.py
"""
Factory for creating model providers
"""

import os
from typing import Optional
import logging

from ..errors import ConfigError
from .base import AssistantProvider, TranscriptionProvider
from .openai_provider import OpenAIAssistantProvider, OpenAITranscriptionProvider

logger = logging.getLogger(__name__)


class ModelProviderFactory:
    """Factory for creating model providers"""

    @staticmethod
    def _api_key(api_key: Optional[str]) -> str:
        key = api_key or os.getenv("OPENAI_API_KEY")
        if not key:
            raise ConfigError("OpenAI API key required")
        return key

    @staticmethod
    def create_transcription_provider(
        provider_type: str = "openai",
        **kwargs
    ) -> TranscriptionProvider:
        """Create a transcription provider"""
        # For now, only OpenAI is implemented for transcription
        if provider_type != "openai":
            logger.warning(f"Transcription provider {provider_type} not implemented, using OpenAI")

        model = kwargs.get("model", "whisper-1")
        logger.info(f"Using OpenAI transcription model {model}")
        return OpenAITranscriptionProvider(
            api_key=ModelProviderFactory._api_key(kwargs.get("api_key")),
            model=model,
        )

    @staticmethod
    def create_assistant_provider(
        provider_type: str = "openai",
        **kwargs
    ) -> AssistantProvider:
        """Create an assistant (threads and runs) provider"""
        if provider_type != "openai":
            logger.warning(f"Assistant provider {provider_type} not implemented, using OpenAI")

        return OpenAIAssistantProvider(api_key=ModelProviderFactory._api_key(kwargs.get("api_key")))
