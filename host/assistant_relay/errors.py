# assistant_relay/errors.py
"""
Exception hierarchy for the relay bot.

StartupError subclasses abort the process before polling starts.
RequestError subclasses fail a single update; the Telegram error handler
logs them and the bot keeps serving other chats.
"""


class RelayError(Exception):
    """Base class for all relay bot errors"""


class StartupError(RelayError):
    """The bot cannot start"""


class ConfigError(StartupError):
    """A required setting is missing or invalid"""


class RequestError(RelayError):
    """Handling of one inbound message failed"""


class AssistantServiceError(RequestError):
    """The assistant service rejected a call or could not be reached"""


class ThreadCreationError(AssistantServiceError):
    """A new conversation thread could not be created"""


class SessionStoreError(RelayError):
    """The session store file cannot be read or written"""
