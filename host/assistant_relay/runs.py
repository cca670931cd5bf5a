# assistant_relay/runs.py
"""
Run orchestration: submit a message, start a run, poll it to a terminal
state and turn the outcome into reply text.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from .model_providers.base import AssistantProvider
from .threads import ThreadManager
from .utils import PollPolicy, Sleep, poll_until

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Run states reported by the assistant service"""
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    CANCELLING = "cancelling"
    REQUIRES_ACTION = "requires_action"
    CANCELLED = "cancelled"
    FAILED = "failed"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"


class OutcomeKind(str, Enum):
    COMPLETED = "completed"
    REQUIRES_ACTION = "requires_action"
    CANCELLED = "cancelled"
    FAILED = "failed"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    TIMEOUT = "timeout"


TIMEOUT_MESSAGE = "Timeout"

# Fixed replies for runs that ended without output
TERMINAL_MESSAGES = {
    OutcomeKind.REQUIRES_ACTION: "Action required for OpenAI assistant",
    OutcomeKind.CANCELLED: "Run is cancelled",
    OutcomeKind.FAILED: "Run is failed",
    OutcomeKind.EXPIRED: "Run is expired",
    OutcomeKind.INCOMPLETE: "Run is incomplete",
    OutcomeKind.TIMEOUT: TIMEOUT_MESSAGE,
}

_TERMINAL_STATUSES = {
    RunStatus.REQUIRES_ACTION: OutcomeKind.REQUIRES_ACTION,
    RunStatus.CANCELLED: OutcomeKind.CANCELLED,
    RunStatus.FAILED: OutcomeKind.FAILED,
    RunStatus.EXPIRED: OutcomeKind.EXPIRED,
    RunStatus.INCOMPLETE: OutcomeKind.INCOMPLETE,
    RunStatus.COMPLETED: OutcomeKind.COMPLETED,
}


@dataclass(frozen=True)
class RunOutcome:
    kind: OutcomeKind
    text: str

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.COMPLETED


def classify_status(status: str) -> Optional[OutcomeKind]:
    """Map a run status to its outcome, or None while the run is still going.

    Statuses this bot does not know are treated as non-terminal.
    """
    try:
        run_status = RunStatus(status)
    except ValueError:
        logger.warning(f"Unknown run status {status!r}, treating as in progress")
        return None
    return _TERMINAL_STATUSES.get(run_status)


def extract_reply_text(content: Iterable[Any]) -> str:
    """Join the text parts of a message; images and other parts are dropped"""
    parts = []
    for part in content:
        if getattr(part, "type", None) != "text":
            continue
        text = getattr(part, "text", None)
        value = getattr(text, "value", None)
        if value:
            parts.append(value)
    return "".join(parts)


class RunOrchestrator:
    """Drives one assistant run per user message"""

    def __init__(
        self,
        provider: AssistantProvider,
        threads: ThreadManager,
        assistant_id: str,
        policy: PollPolicy = PollPolicy(),
        fresh_thread_per_message: bool = False,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider
        self.threads = threads
        self.assistant_id = assistant_id
        self.policy = policy
        self.fresh_thread_per_message = fresh_thread_per_message
        self.sleep = sleep

    async def run_message(self, thread_id: str, text: str) -> str:
        """Send `text` to the assistant and return the reply to show the user"""
        outcome = await self.run(thread_id, text)
        return outcome.text

    async def run(self, thread_id: str, text: str) -> RunOutcome:
        if self.fresh_thread_per_message:
            # Every message starts a conversation of its own
            thread_id = await self.threads.create_thread()

        await self.provider.create_message(thread_id, text)
        run_id = await self.provider.create_run(thread_id, self.assistant_id)
        logger.info(f"Run {run_id} started on thread {thread_id}")

        kind = await poll_until(
            lambda: self.provider.retrieve_run_status(thread_id, run_id),
            classify_status,
            self.policy,
            sleep=self.sleep,
        )
        if kind is None:
            kind = OutcomeKind.TIMEOUT
            logger.warning(f"Run {run_id} still running after {self.policy.ceiling:.0f}s")

        if kind != OutcomeKind.COMPLETED:
            logger.info(f"Run {run_id} ended as {kind.value}")
            return RunOutcome(kind, TERMINAL_MESSAGES[kind])

        content = await self.provider.latest_message_content(thread_id)
        reply = extract_reply_text(content)
        logger.info(f"Run {run_id} completed with {len(reply)} chars of reply")
        return RunOutcome(kind, reply)
