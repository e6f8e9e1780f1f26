"""In-memory conversation sessions keyed by the lead's phone number. Lost on restart."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

from app.core.errors import SessionNotFound

logger = logging.getLogger(__name__)

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str


class SessionStore:
    """
    Owns the session key -> transcript mapping. Transcripts are append-only and returned as copies.

    Swap in another implementation with the same methods to move sessions out of process memory.
    """

    def __init__(self) -> None:
        self._transcripts: dict[str, list[ConversationTurn]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._generations: dict[str, int] = {}

    def start_session(self, session_key: str, greeting: str) -> list[ConversationTurn]:
        """Start (or restart) a session seeded with the assistant's greeting. Restarting discards the old transcript."""
        if session_key in self._transcripts:
            logger.info("Restarting chat for %s; previous transcript discarded", session_key)
        self._transcripts[session_key] = [ConversationTurn("assistant", greeting)]
        self._generations[session_key] = self._generations.get(session_key, 0) + 1
        return self.transcript_of(session_key)

    def append_user_turn(self, session_key: str, text: str) -> list[ConversationTurn]:
        self._get(session_key).append(ConversationTurn("user", text))
        return self.transcript_of(session_key)

    def append_assistant_turn(self, session_key: str, text: str, generation: int | None = None) -> bool:
        """
        Append the assistant's reply. With `generation`, the reply is dropped (returns False)
        if the session was restarted since that generation was read.
        """
        transcript = self._get(session_key)
        if generation is not None and generation != self._generations[session_key]:
            logger.warning("Chat for %s was restarted mid-reply; reply not recorded", session_key)
            return False
        transcript.append(ConversationTurn("assistant", text))
        return True

    def generation(self, session_key: str) -> int:
        """Incremented on every (re)start of the session."""
        self._get(session_key)
        return self._generations[session_key]

    def transcript_of(self, session_key: str) -> list[ConversationTurn]:
        return list(self._get(session_key))

    def has_session(self, session_key: str) -> bool:
        return session_key in self._transcripts

    def lock(self, session_key: str) -> asyncio.Lock:
        """Lock serialising continuation requests for one session key."""
        lock = self._locks.get(session_key)
        if lock is None:
            lock = self._locks[session_key] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._transcripts)

    def _get(self, session_key: str) -> list[ConversationTurn]:
        try:
            return self._transcripts[session_key]
        except KeyError:
            raise SessionNotFound(session_key) from None
