"""
Model provider implementations for the relay bot
"""

from .base import (
    TranscriptionProvider,
    AssistantProvider,
)

from .factory import ModelProviderFactory

__all__ = [
    'TranscriptionProvider',
    'AssistantProvider',
    'ModelProviderFactory'
]
