# assistant_relay/session_store.py
"""
Session store: maps a chat id to the assistant thread that holds its conversation
"""

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import SessionStoreError

logger = logging.getLogger(__name__)

SessionId = Union[int, str]


def session_key(session_id: SessionId) -> str:
    """Sessions are always keyed by the string form of the chat id"""
    return str(session_id).strip()


class SessionStore(ABC):
    """Base interface for session id -> thread id lookups"""

    @abstractmethod
    def get(self, session_id: SessionId) -> Optional[str]:
        """Return the mapped thread id, if any"""

    @abstractmethod
    def set(self, session_id: SessionId, thread_id: str) -> None:
        """Map the session to a thread, replacing any previous mapping"""

    @abstractmethod
    def delete(self, session_id: SessionId) -> bool:
        """Remove the mapping; returns True if one existed"""


class MemorySessionStore(SessionStore):
    """In-process store, lost on restart"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._threads: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, session_id: SessionId) -> Optional[str]:
        with self._lock:
            return self._threads.get(session_key(session_id))

    def set(self, session_id: SessionId, thread_id: str) -> None:
        with self._lock:
            self._threads[session_key(session_id)] = thread_id.strip()

    def delete(self, session_id: SessionId) -> bool:
        with self._lock:
            return self._threads.pop(session_key(session_id), None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._threads)


class JsonFileSessionStore(SessionStore):
    """Durable store backed by a JSON object file.

    Every change rewrites the whole file through a temporary sibling and an
    atomic replace, so a crash never leaves a half-written mapping behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._threads: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SessionStoreError(f"Failed to read session store {self.path}: {exc}") from exc
        except ValueError as exc:
            quarantined = self._quarantine()
            logger.warning(f"Session store {self.path} is corrupt ({exc}); moved to {quarantined}")
            return {}

        if not isinstance(raw, dict):
            quarantined = self._quarantine()
            logger.warning(f"Session store {self.path} root is not an object; moved to {quarantined}")
            return {}

        threads: Dict[str, str] = {}
        for key, value in raw.items():
            if not isinstance(value, str) or not value.strip():
                continue
            threads[session_key(key)] = value.strip()
        logger.info(f"Loaded {len(threads)} session(s) from {self.path}")
        return threads

    def _quarantine(self) -> Path:
        timestamp = time.strftime("%Y%m%d%H%M%S", time.gmtime())
        quarantined = self.path.with_name(f"{self.path.name}.corrupt.{timestamp}")
        self.path.replace(quarantined)
        return quarantined

    def _persist(self, threads: Dict[str, str]) -> None:
        # Caller holds the lock and commits `threads` only after this returns
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(threads, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
            tmp_path.replace(self.path)
        except OSError as exc:
            raise SessionStoreError(f"Failed to write session store {self.path}: {exc}") from exc

    def get(self, session_id: SessionId) -> Optional[str]:
        with self._lock:
            return self._threads.get(session_key(session_id))

    def set(self, session_id: SessionId, thread_id: str) -> None:
        key = session_key(session_id)
        normalized = thread_id.strip()
        with self._lock:
            if self._threads.get(key) == normalized:
                return
            updated = dict(self._threads)
            updated[key] = normalized
            self._persist(updated)
            self._threads = updated

    def delete(self, session_id: SessionId) -> bool:
        with self._lock:
            key = session_key(session_id)
            if key not in self._threads:
                return False
            updated = dict(self._threads)
            del updated[key]
            self._persist(updated)
            self._threads = updated
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._threads)


def create_session_store(path: str) -> SessionStore:
    """JSON file store when a path is configured, memory store otherwise"""
    if path and path.strip():
        return JsonFileSessionStore(path.strip())
    logger.warning("SESSION_STORE_PATH is empty; sessions will not survive a restart")
    return MemorySessionStore()
