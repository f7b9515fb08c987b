"""Prize Nodes - mint the prize and wait for its transaction hash

Neither node holds the session lock while talking to the minting service.
Outcomes are written back to the SessionStore even if the inbound request
is cancelled halfway.
"""

import asyncio
import logging
from typing import Dict, Any
from langgraph.graph import END
from langgraph.runtime import Runtime

from app import analytics
from app.minting import ConfirmTimeout, IssueError, confirm_transaction, issue_prize
from app.models import TransactionRecord
from ..state import TurnState
from ..context import TurnContext
from ..prompts import (
    get_issue_failed_message,
    get_prize_pending_message,
    get_prize_sent_message,
    get_transaction_url,
)

logger = logging.getLogger(__name__)


async def _issue_and_record(context: TurnContext, recipient: str) -> TransactionRecord:
    """Mint, then record the outcome against the session.

    Runs as its own task so the outcome lands in the store even when the
    awaiting request is cancelled.
    """
    try:
        record = await issue_prize(context.minting_client, recipient)
    except BaseException:
        await context.store.release_claim(context.session_id)
        raise

    await context.store.record_issued(context.session_id, record)
    analytics.track_prize_issued(context.session_id, record.transaction_id)
    return record


def _log_detached_outcome(task: "asyncio.Future[TransactionRecord]") -> None:
    """Consume the issuance result so a failure after cancellation is still logged."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"❌ Prize issuance failed after its request went away: {error}")


async def issue_prize_node(state: TurnState, *, runtime: Runtime[TurnContext]) -> Dict[str, Any]:
    """Send the mint call for the reserved claim (single attempt)

    Returns:
        transaction_id on success, or a failure reply with the session back
        in ACTIVE
    """
    context = runtime.context
    recipient = state["recipient_address"]

    task = asyncio.ensure_future(_issue_and_record(context, recipient))
    try:
        record = await asyncio.shield(task)
    except asyncio.CancelledError:
        logger.warning(f"⚠️ Request for {context.masked_id} cancelled during issuance, outcome will still be recorded")
        task.add_done_callback(_log_detached_outcome)
        raise
    except IssueError as e:
        analytics.track_prize_failed(context.session_id, str(e), e.status_code)
        return {
            "workflow_step": "issue_failed",
            "response_text": get_issue_failed_message(recipient),
            "issue_error": {"message": str(e), "detail": e.detail, "status_code": e.status_code}
        }
    except Exception as e:
        logger.exception(f"❌ Unexpected error issuing prize for {context.masked_id}: {e}")
        analytics.track_prize_failed(context.session_id, str(e))
        return {
            "workflow_step": "issue_error",
            "response_text": get_issue_failed_message(recipient),
            "issue_error": {"message": str(e), "detail": None, "status_code": None}
        }

    return {
        "workflow_step": "prize_issued",
        "transaction_id": record.transaction_id
    }


def route_after_issue(state: TurnState) -> str:
    if state.get("transaction_id"):
        return "confirm_transaction"
    return END


async def confirm_transaction_node(state: TurnState, *, runtime: Runtime[TurnContext]) -> Dict[str, Any]:
    """Poll for the transaction hash within the configured bound

    Returns:
        Reply with the explorer link, or the degraded "details unavailable"
        reply when the bound is exceeded
    """
    context = runtime.context
    recipient = state["recipient_address"]
    transaction_id = state["transaction_id"]

    try:
        transaction_hash = await confirm_transaction(
            context.minting_client,
            transaction_id,
            poll_interval=context.poll_interval,
            deadline=context.confirm_deadline,
            max_attempts=context.confirm_max_attempts
        )
    except asyncio.CancelledError:
        logger.warning(f"⚠️ Confirmation polling cancelled for {context.masked_id}")
        await context.store.record_confirmation(context.session_id, None, "unknown")
        raise
    except ConfirmTimeout as e:
        logger.warning(f"⏰ {e}")
        analytics.track_confirmation_timeout(context.session_id, transaction_id, e.attempts)
        await context.store.record_confirmation(context.session_id, None, "pending")
        return {
            "workflow_step": "confirmation_timeout",
            "response_text": get_prize_pending_message(recipient)
        }
    except Exception as e:
        logger.exception(f"❌ Unexpected error confirming {transaction_id} for {context.masked_id}: {e}")
        await context.store.record_confirmation(context.session_id, None, "pending")
        return {
            "workflow_step": "confirmation_error",
            "response_text": get_prize_pending_message(recipient)
        }

    await context.store.record_confirmation(context.session_id, transaction_hash, "confirmed")
    analytics.track_prize_confirmed(context.session_id, transaction_id, transaction_hash)

    return {
        "workflow_step": "prize_confirmed",
        "transaction_hash": transaction_hash,
        "response_text": get_prize_sent_message(recipient, get_transaction_url(transaction_hash))
    }
