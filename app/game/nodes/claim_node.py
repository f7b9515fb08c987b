"""Claim Node - decides whether this turn claims the prize"""

import logging
from typing import Dict, Any
from langgraph.graph import END
from langgraph.runtime import Runtime

from ..state import TurnState
from ..context import TurnContext
from ..prompts import ALREADY_WON_MESSAGE, get_invalid_address_message
from ..win_detector import detect_win_claim, is_valid_address

logger = logging.getLogger(__name__)


async def detect_claim_node(state: TurnState, *, runtime: Runtime[TurnContext]) -> Dict[str, Any]:
    """Run the win detector and reserve the claim

    A malformed address keeps the claim open and asks again. A valid one
    moves the session to ISSUING; if another turn got there first the
    player is told the prize is already taken care of.
    """
    context = runtime.context
    recipient = detect_win_claim(state.get("turns", []), state["session"])

    if recipient is None:
        return {"workflow_step": "no_claim"}

    if not is_valid_address(recipient):
        logger.info(f"🚫 {context.masked_id} sent an invalid address")
        await context.store.mark_pending_claim(context.session_id)
        return {
            "workflow_step": "invalid_address",
            "response_text": get_invalid_address_message(recipient)
        }

    if not await context.store.reserve_claim(context.session_id, recipient):
        logger.warning(f"⚠️ Duplicate claim for {context.masked_id} ignored")
        return {
            "workflow_step": "claim_rejected",
            "response_text": ALREADY_WON_MESSAGE
        }

    logger.info(f"🎯 Claim reserved for {context.masked_id} -> {recipient}")
    return {
        "workflow_step": "claim_reserved",
        "recipient_address": recipient
    }


def route_after_claim(state: TurnState) -> str:
    if state.get("response_text"):
        return END
    if state.get("recipient_address"):
        return "issue_prize"
    return "compose_prompt"
