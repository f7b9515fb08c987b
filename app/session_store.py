"""In-memory session storage for game state, keyed by session id."""

import asyncio
import logging
import re
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional, Tuple

from app.config import config
from app.models import GamePhase, Session, TransactionRecord

logger = logging.getLogger(__name__)

WordProvider = Callable[[], Awaitable[str]]

_WORD_PATTERN = re.compile(r"^[a-z][a-z\-]{1,30}$")

# Outcomes of begin_turn()
TURN_CONTINUE = "continue"
TURN_ALREADY_WON = "already_won"
TURN_CLAIM_IN_PROGRESS = "claim_in_progress"
TURN_EXHAUSTED = "exhausted"


def mask_session_id(session_id: str) -> str:
    """Shorten a session id for log lines."""
    return f"{session_id[:5]}***" if len(session_id) > 5 else "***"


class SessionStore:
    """Process-lifetime store of Session records.

    Each session id owns an independent Session and its own asyncio.Lock.
    Every public coroutine takes that lock for the duration of its mutation,
    so callers never hold it across network waits.
    """

    def __init__(self, ttl_minutes: int = config.SESSION_TTL_MINUTES):
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self.ttl = timedelta(minutes=ttl_minutes)

    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock guarding a session."""
        return self._locks.setdefault(session_id, asyncio.Lock())

    def _prune_expired(self) -> None:
        cutoff = datetime.now() - self.ttl
        expired = [
            sid for sid, session in self._sessions.items()
            if session.last_active < cutoff and not self.lock(sid).locked()
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
            self._locks.pop(sid, None)
        if expired:
            logger.info(f"🧹 Pruned {len(expired)} idle sessions")

    def _get_or_create(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            self._prune_expired()
            session = Session(session_id=session_id)
            self._sessions[session_id] = session
            logger.info(f"✨ New session {mask_session_id(session_id)}")
        return session

    def get(self, session_id: str) -> Session:
        """Return a snapshot of the session, creating it on first access."""
        return self._get_or_create(session_id).model_copy()

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Unlocked helpers (caller holds the session lock)
    # ------------------------------------------------------------------

    def _increment(self, session: Session) -> None:
        session.questions_asked += 1
        session.last_active = datetime.now()

    def _mark_won(self, session: Session) -> None:
        session.won = True
        session.phase = GamePhase.WON_ISSUED
        session.last_active = datetime.now()

    def _clear_game(self, session: Session) -> None:
        session.secret_word = None
        session.questions_asked = 0
        session.recipient_address = None
        session.transaction_id = None
        session.transaction_hash = None
        session.prize_status = "none"

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def increment(self, session_id: str) -> Session:
        """Count one processed turn."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            self._increment(session)
            return session.model_copy()

    async def mark_won(self, session_id: str) -> None:
        """Mark the prize as issued for the current game."""
        async with self.lock(session_id):
            self._mark_won(self._get_or_create(session_id))

    async def reset(self, session_id: str) -> None:
        """Start over: clears the secret word, the counter and the won flag."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            self._clear_game(session)
            session.won = False
            session.phase = GamePhase.ACTIVE
            session.last_active = datetime.now()
        logger.info(f"🔄 Session {mask_session_id(session_id)} reset")

    async def exhaust(self, session_id: str) -> None:
        """End the current game without a win and clear it for the next one."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            self._clear_game(session)
            session.phase = GamePhase.EXHAUSTED

    async def begin_turn(self, session_id: str) -> Tuple[str, Session]:
        """Gate and count an inbound turn.

        Returns one of the TURN_* outcomes together with a snapshot taken
        after the update. Already-won and in-flight claims leave the state
        untouched; running out of questions clears the game.
        """
        async with self.lock(session_id):
            session = self._get_or_create(session_id)

            if session.phase == GamePhase.WON_ISSUED:
                return TURN_ALREADY_WON, session.model_copy()
            if session.phase == GamePhase.ISSUING:
                return TURN_CLAIM_IN_PROGRESS, session.model_copy()

            if session.phase == GamePhase.EXHAUSTED:
                session.phase = GamePhase.ACTIVE

            self._increment(session)

            if (
                session.questions_asked > session.max_questions
                and not session.won
                and session.phase != GamePhase.WON_PENDING_CLAIM
            ):
                logger.info(
                    f"⌛ Session {mask_session_id(session_id)} exhausted after "
                    f"{session.max_questions} questions"
                )
                self._clear_game(session)
                session.phase = GamePhase.EXHAUSTED
                return TURN_EXHAUSTED, session.model_copy()

            return TURN_CONTINUE, session.model_copy()

    async def ensure_secret_word(
        self,
        session_id: str,
        provider: Optional[WordProvider],
        is_usable: Optional[Callable[[str], bool]] = None,
    ) -> str:
        """Return the game's secret word, choosing one on first use.

        Never raises: provider failures and unusable words fall back to
        the configured default word. is_usable lets the caller veto a
        candidate, e.g. one the prompt text would otherwise give away.
        """
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            if session.secret_word:
                return session.secret_word

            word = config.DEFAULT_SECRET_WORD
            if provider is not None:
                try:
                    candidate = (await provider()).strip().strip('."\'').lower()
                    if _WORD_PATTERN.match(candidate) and (is_usable is None or is_usable(candidate)):
                        word = candidate
                    else:
                        logger.warning(f"⚠️ Word provider returned unusable word {candidate!r}, using default")
                except Exception as e:
                    logger.warning(f"⚠️ Word generation failed, using default word: {e}")

            session.secret_word = word
            logger.info(f"🎲 Secret word chosen for {mask_session_id(session_id)}")
            return word

    async def mark_pending_claim(self, session_id: str) -> None:
        """Record that the agent announced a win and is waiting for an address."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            if session.phase == GamePhase.ACTIVE and not session.won:
                session.phase = GamePhase.WON_PENDING_CLAIM
                logger.info(f"🏆 Win announced for {mask_session_id(session_id)}, awaiting address")

    async def reserve_claim(self, session_id: str, recipient_address: str) -> bool:
        """Atomically take the right to issue this game's prize.

        Returns False when the prize is already issued or being issued.
        """
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            if session.won or session.phase in (GamePhase.ISSUING, GamePhase.WON_ISSUED):
                return False
            session.phase = GamePhase.ISSUING
            session.recipient_address = recipient_address
            session.last_active = datetime.now()
            return True

    async def release_claim(self, session_id: str) -> None:
        """Give up a reserved claim after the mint call failed."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            if session.phase == GamePhase.ISSUING:
                session.phase = GamePhase.ACTIVE
                session.recipient_address = None

    async def record_issued(self, session_id: str, record: TransactionRecord) -> None:
        """Record a created transaction; the game is now won."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            self._mark_won(session)
            session.transaction_id = record.transaction_id
            session.prize_status = "pending"

    async def record_confirmation(self, session_id: str, transaction_hash: Optional[str], status: str) -> None:
        """Attach the confirmation outcome to the issued prize."""
        async with self.lock(session_id):
            session = self._get_or_create(session_id)
            session.transaction_hash = transaction_hash
            session.prize_status = status
