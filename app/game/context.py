"""Turn Context Schema for LangGraph Static Runtime Context

Holds the session identifier and the collaborators a turn needs. Nodes read
it through Runtime[TurnContext]; the model never sees it.
"""

from dataclasses import dataclass
from typing import Optional

from app.config import config
from app.minting import SyndicateClient
from app.session_store import SessionStore, WordProvider, mask_session_id


@dataclass
class TurnContext:
    """Static runtime context for one turn (immutable during the turn)"""

    # Caller-held session token
    session_id: str

    # Collaborators
    store: SessionStore
    minting_client: SyndicateClient
    word_provider: Optional[WordProvider] = None

    # Confirmation polling bound
    poll_interval: float = config.CONFIRM_POLL_INTERVAL_SECONDS
    confirm_deadline: float = config.CONFIRM_DEADLINE_SECONDS
    confirm_max_attempts: Optional[int] = config.CONFIRM_MAX_ATTEMPTS

    @property
    def masked_id(self) -> str:
        return mask_session_id(self.session_id)
