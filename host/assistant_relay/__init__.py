# assistant_relay/__init__.py
"""
Assistant Relay Package
"""

from .config import Config, load_config, setup_logging
from .errors import (
    RelayError,
    StartupError,
    ConfigError,
    RequestError,
    AssistantServiceError,
    ThreadCreationError,
    SessionStoreError,
)
from .session_store import SessionStore, MemorySessionStore, JsonFileSessionStore, create_session_store
from .threads import ThreadManager
from .runs import RunOrchestrator, RunOutcome, RunStatus, OutcomeKind, classify_status, extract_reply_text
from .speech import transcribe_voice
from .chat_platform import ChatPlatform, InboundMessage
from .command_handler import CommandHandler
from .router import MessageRouter
from .utils import PollPolicy, poll_until

__all__ = [
    'Config',
    'load_config',
    'setup_logging',
    'RelayError',
    'StartupError',
    'ConfigError',
    'RequestError',
    'AssistantServiceError',
    'ThreadCreationError',
    'SessionStoreError',
    'SessionStore',
    'MemorySessionStore',
    'JsonFileSessionStore',
    'create_session_store',
    'ThreadManager',
    'RunOrchestrator',
    'RunOutcome',
    'RunStatus',
    'OutcomeKind',
    'classify_status',
    'extract_reply_text',
    'transcribe_voice',
    'ChatPlatform',
    'InboundMessage',
    'CommandHandler',
    'MessageRouter',
    'PollPolicy',
    'poll_until',
]
