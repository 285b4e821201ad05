"""Interactive session state: message log, system prompt and lifecycle."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .logger import get_logger

logger = get_logger(__name__)


class MessageRole(str, Enum):
    """Roles a session message can have."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionMessage:
    """Represents a single message in the conversation."""

    role: MessageRole
    content: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert message to dictionary format."""
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionMessage":
        """Create message from dictionary format."""
        return cls(
            role=MessageRole(data["role"]),
            content=data["content"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class SessionExitResult:
    """How a session ended; ``exit_code`` becomes the process exit code."""

    exit_code: int
    exit_reason: str
    was_clean: bool


class SessionStateError(RuntimeError):
    """Raised when a mutating operation is used on an inactive session."""

    pass


class ReplSession:
    """Manages the state of an interactive chat session.

    The session starts inactive. :meth:`start` activates it (and is also the
    way to reset it), :meth:`end` and :meth:`end_with_error` deactivate it.
    Adding messages, changing the system prompt and clearing history are only
    allowed while active.
    """

    def __init__(self, max_turns: int = 100):
        self._messages: List[SessionMessage] = []
        self._active = False
        self._system_prompt: Optional[str] = None
        self._max_turns = max_turns

    @property
    def messages(self) -> Sequence[SessionMessage]:
        return tuple(self._messages)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def system_prompt(self) -> Optional[str]:
        return self._system_prompt

    @property
    def max_turns(self) -> int:
        return self._max_turns

    def start(self, system_prompt: Optional[str] = None):
        """Start (or restart) the session with an optional system prompt."""
        self._active = True
        self._messages.clear()
        self._system_prompt = system_prompt

        if system_prompt:
            self._messages.append(
                SessionMessage(MessageRole.SYSTEM, system_prompt, _utcnow())
            )

        logger.debug(
            "Session started (system prompt: %s)", "set" if system_prompt else "none"
        )

    def add_user_message(self, content: str):
        """Add a user message to the session."""
        self._append(MessageRole.USER, content)

    def add_assistant_message(self, content: str):
        """Add an assistant message to the session."""
        self._append(MessageRole.ASSISTANT, content)

    def append_message(self, message: SessionMessage):
        """Append an existing message, keeping its timestamp.

        System messages replace the current system prompt instead of being
        appended.
        """
        self._ensure_active()

        if message.role == MessageRole.SYSTEM:
            self.set_system_prompt(message.content)
            return

        self._messages.append(
            SessionMessage(message.role, message.content, message.timestamp)
        )

    def set_system_prompt(self, system_prompt: str):
        """Update the system prompt, in place if a system message exists."""
        self._ensure_active()

        self._system_prompt = system_prompt

        existing = self._find_system_message()
        if existing is not None:
            existing.content = system_prompt
            existing.timestamp = _utcnow()
        else:
            self._messages.insert(
                0, SessionMessage(MessageRole.SYSTEM, system_prompt, _utcnow())
            )

    def get_history(self, last_n_turns: int = 10) -> List[SessionMessage]:
        """Get the most recent messages, excluding the system message.

        A turn is a user message plus an assistant reply, so up to
        ``2 * last_n_turns`` trailing messages are returned. Turns do not
        need to be complete pairs.
        """
        conversation = [m for m in self._messages if m.role != MessageRole.SYSTEM]
        count = min(last_n_turns * 2, len(conversation))
        if count <= 0:
            return []
        return conversation[-count:]

    def clear_history(self):
        """Remove all messages except the system message."""
        self._ensure_active()

        system_message = self._find_system_message()
        removed = len(self._messages) - (1 if system_message else 0)
        self._messages.clear()

        if system_message is not None:
            self._messages.append(system_message)

        logger.debug("Cleared %d messages from session", removed)

    def end(self, reason: str = "quit") -> SessionExitResult:
        """End the session cleanly. Ending an inactive session is allowed."""
        self._active = False
        logger.debug("Session ended: %s", reason)
        return SessionExitResult(exit_code=0, exit_reason=reason, was_clean=True)

    def end_with_error(self, message: str) -> SessionExitResult:
        """End the session because of an error."""
        self._active = False
        logger.info("Session ended with error: %s", message)
        return SessionExitResult(exit_code=1, exit_reason=message, was_clean=False)

    @staticmethod
    def is_exit_command(input_text: Optional[str]) -> bool:
        """Check whether a line asks to leave the session.

        Only ``exit``, ``/quit`` and ``/exit`` count; a bare ``quit`` is sent
        to the model like any other text.
        """
        if input_text is None:
            return False
        return input_text.strip().lower() in ("exit", "/quit", "/exit")

    def get_turn_count(self) -> int:
        """Get the number of turns, counted as user messages."""
        return sum(1 for m in self._messages if m.role == MessageRole.USER)

    def is_near_limit(self) -> bool:
        """Check whether the session is close to ``max_turns``."""
        return self.get_turn_count() >= self._max_turns - 5

    def _append(self, role: MessageRole, content: str):
        self._ensure_active()
        self._messages.append(SessionMessage(role, content, _utcnow()))

    def _find_system_message(self) -> Optional[SessionMessage]:
        for message in self._messages:
            if message.role == MessageRole.SYSTEM:
                return message
        return None

    def _ensure_active(self):
        if not self._active:
            raise SessionStateError("Session is not active.")
