"""Gate Node - counts the turn and ends finished games

Entry node of the turn workflow. Already-won sessions get a fixed reply
with no state change; running past the question budget ends the game.
"""

import logging
from typing import Dict, Any
from langgraph.graph import END
from langgraph.runtime import Runtime

from app import analytics
from app.session_store import (
    TURN_ALREADY_WON,
    TURN_CLAIM_IN_PROGRESS,
    TURN_EXHAUSTED,
)
from ..state import TurnState
from ..context import TurnContext
from ..prompts import ALREADY_WON_MESSAGE, CLAIM_IN_PROGRESS_MESSAGE, EXHAUSTED_MESSAGE

logger = logging.getLogger(__name__)


async def gate_node(state: TurnState, *, runtime: Runtime[TurnContext]) -> Dict[str, Any]:
    """Gate and count the inbound turn

    Args:
        state: Turn state with the inbound conversation
        runtime: Runtime context with TurnContext

    Returns:
        Updated state with the session snapshot, and response_text when the
        turn ends here
    """
    context = runtime.context
    outcome, session = await context.store.begin_turn(context.session_id)

    if outcome == TURN_ALREADY_WON:
        logger.info(f"🏆 {context.masked_id} already won, replying with fixed message")
        return {
            "workflow_step": "already_won",
            "session": session,
            "response_text": ALREADY_WON_MESSAGE
        }

    if outcome == TURN_CLAIM_IN_PROGRESS:
        logger.info(f"⏳ {context.masked_id} sent a turn while the prize is being issued")
        return {
            "workflow_step": "claim_in_progress",
            "session": session,
            "response_text": CLAIM_IN_PROGRESS_MESSAGE
        }

    if outcome == TURN_EXHAUSTED:
        analytics.track_game_exhausted(context.session_id, session.max_questions)
        return {
            "workflow_step": "exhausted",
            "session": session,
            "response_text": EXHAUSTED_MESSAGE
        }

    if session.questions_asked == 1:
        analytics.track_game_started(context.session_id)
    analytics.track_question_asked(context.session_id, session.questions_asked, session.max_questions)

    logger.info(f"🔢 {context.masked_id} turn {session.questions_asked}/{session.max_questions}")
    return {
        "workflow_step": "turn_counted",
        "session": session
    }


def route_after_gate(state: TurnState) -> str:
    """Stop when the gate produced a reply, otherwise look for a claim."""
    if state.get("response_text"):
        return END
    return "detect_claim"
