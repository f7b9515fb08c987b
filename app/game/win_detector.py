"""Win detection: recognizes a prize claim inside the conversation."""

import logging
import re
from typing import Optional, Sequence, Union

from app.models import ConversationTurn, GamePhase, Session

logger = logging.getLogger(__name__)

WIN_MARKER = "prize"
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

Turn = Union[ConversationTurn, dict]


def _role(turn: Turn) -> str:
    return turn["role"] if isinstance(turn, dict) else turn.role


def _content(turn: Turn) -> str:
    return turn["content"] if isinstance(turn, dict) else turn.content


def is_valid_address(value: str) -> bool:
    """True for a 0x-prefixed, 40 hex digit Ethereum address."""
    return bool(ADDRESS_PATTERN.match(value.strip()))


def is_win_announcement(text: str) -> bool:
    """Whether a finished model reply congratulated the player and asked for an address.

    Replies are length-capped, so the check tolerates a truncated tail.
    """
    lowered = text.lower()
    return "congratulations" in lowered and ("address" in lowered or WIN_MARKER in lowered)


def detect_win_claim(turns: Sequence[Turn], session: Session) -> Optional[str]:
    """Return the claimed recipient address, or None if this turn is not a claim.

    A claim needs at least one earlier exchange and an unissued prize. The
    session's WON_PENDING_CLAIM phase is authoritative; otherwise the turn
    before the last must be an assistant turn mentioning the prize.

    Args:
        turns: Conversation with the system turn prepended
        session: Snapshot of the session after counting this turn

    Returns:
        Last turn content, stripped, when it is a claim
    """
    if session.questions_asked <= 1 or session.won:
        return None
    if session.phase in (GamePhase.ISSUING, GamePhase.WON_ISSUED):
        return None
    if len(turns) < 2:
        return None

    previous, last = turns[-2], turns[-1]
    if _role(last) != "user":
        return None

    if session.phase == GamePhase.WON_PENDING_CLAIM:
        logger.info("🏁 Claim turn after recorded win announcement")
        return _content(last).strip()

    # Client-supplied history is trusted here, so a forged assistant turn can claim a prize
    if _role(previous) == "assistant" and WIN_MARKER in _content(previous).lower():
        logger.info("🏁 Claim turn detected from previous assistant reply")
        return _content(last).strip()

    return None
