"""LangGraph twenty questions game

Architecture:
- StateGraph with context_schema for static runtime context (TurnContext)
- SessionStore holds per-session game state, keyed by the caller's token
- Groq model answers questions; Syndicate mints the prize on a win
"""

from .workflow import create_turn_agent
from .state import TurnState
from .context import TurnContext

__all__ = [
    "create_turn_agent",
    "TurnState",
    "TurnContext"
]
