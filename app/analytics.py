"""PostHog analytics integration for tracking game events."""

from typing import Optional, Dict, Any
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

# Global PostHog client instance
_posthog_client = None


def init_posthog(api_key: str, host: str = "https://eu.i.posthog.com"):
    """
    Initialize PostHog client.

    Args:
        api_key: PostHog project API key
        host: PostHog host URL (default: EU instance)
    """
    global _posthog_client

    if not api_key or api_key == "PLACEHOLDER":
        logger.warning("PostHog API key not configured - analytics disabled")
        _posthog_client = None
        return

    try:
        from posthog import Posthog
        _posthog_client = Posthog(
            project_api_key=api_key,
            host=host
        )
        logger.info(f"PostHog analytics initialized (host: {host})")
    except Exception as e:
        logger.error(f"Failed to initialize PostHog: {e}")
        _posthog_client = None


def track_event(
    distinct_id: str,
    event: str,
    properties: Optional[Dict[str, Any]] = None
):
    """
    Track an event in PostHog.

    Args:
        distinct_id: Session identifier
        event: Event name (e.g., "prize_issued")
        properties: Additional event properties
    """
    if _posthog_client is None:
        return  # Analytics disabled

    try:
        _posthog_client.capture(
            distinct_id=distinct_id,
            event=event,
            properties=properties or {}
        )
    except Exception as e:
        logger.error(f"Error tracking event '{event}': {e}")


def shutdown():
    """Flush queued events."""
    if _posthog_client is None:
        return
    try:
        _posthog_client.shutdown()
    except Exception as e:
        logger.error(f"Error flushing PostHog: {e}")


# Convenience functions for specific events

def track_game_started(session_id: str):
    """Track when a session starts a new game (first question)."""
    track_event(
        distinct_id=session_id,
        event="game_started",
        properties={
            "timestamp": datetime.now().isoformat(),
            "source": "web"
        }
    )


def track_question_asked(session_id: str, questions_asked: int, max_questions: int):
    track_event(
        distinct_id=session_id,
        event="question_asked",
        properties={
            "questions_asked": questions_asked,
            "questions_left": max(max_questions - questions_asked, 0)
        }
    )


def track_win_announced(session_id: str, questions_asked: int):
    """Track when the model congratulates the player."""
    track_event(
        distinct_id=session_id,
        event="win_announced",
        properties={"questions_asked": questions_asked}
    )


def track_game_exhausted(session_id: str, max_questions: int):
    """Track when the player runs out of questions."""
    track_event(
        distinct_id=session_id,
        event="game_exhausted",
        properties={"max_questions": max_questions}
    )


def track_prize_issued(session_id: str, transaction_id: str):
    track_event(
        distinct_id=session_id,
        event="prize_issued",
        properties={
            "transaction_id": transaction_id,
            "issued_at": datetime.now().isoformat()
        }
    )


def track_prize_confirmed(session_id: str, transaction_id: str, transaction_hash: str):
    track_event(
        distinct_id=session_id,
        event="prize_confirmed",
        properties={
            "transaction_id": transaction_id,
            "transaction_hash": transaction_hash
        }
    )


def track_prize_failed(session_id: str, reason: str, status_code: Optional[int] = None):
    """Track when the mint call fails."""
    track_event(
        distinct_id=session_id,
        event="prize_issue_failed",
        properties={
            "reason": reason,
            "status_code": status_code
        }
    )


def track_confirmation_timeout(session_id: str, transaction_id: str, attempts: int):
    """Track when no hash showed up within the polling bound."""
    track_event(
        distinct_id=session_id,
        event="prize_confirmation_timeout",
        properties={
            "transaction_id": transaction_id,
            "attempts": attempts
        }
    )
