"""LangGraph State Schema for one game turn

Defines the data that flows between nodes while a single inbound turn is
processed. Session identity and collaborators live in TurnContext, NOT here.
"""

from typing import Any, Dict, List, Optional, TypedDict

from app.models import Session


class TurnState(TypedDict, total=False):
    """Dynamic state for one inbound conversational turn"""

    # Inbound conversation as {"role", "content"} dicts, never rewritten
    turns: List[Dict[str, str]]

    # Session snapshot taken after the gate counted this turn
    session: Optional[Session]

    # Fixed reply (already won, exhausted, prize outcome...)
    response_text: Optional[str]

    # System turn + conversation for the model, when the model should answer
    prompt_turns: Optional[List[Dict[str, str]]]

    # Prize workflow
    recipient_address: Optional[str]
    transaction_id: Optional[str]
    transaction_hash: Optional[str]
    issue_error: Optional[Dict[str, Any]]

    # Workflow tracking
    workflow_step: Optional[str]
