"""Data models for the twenty questions prize game."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.config import config


class GamePhase(str, Enum):
    """Lifecycle of one game within a session."""
    ACTIVE = "active"
    WON_PENDING_CLAIM = "won_pending_claim"  # Win announced, awaiting address
    ISSUING = "issuing"  # Claim reserved, mint/confirm in flight
    WON_ISSUED = "won_issued"
    EXHAUSTED = "exhausted"


class ConversationTurn(BaseModel):
    """Represents a single turn in the conversation."""
    role: Literal["system", "user", "assistant"] = Field(..., description="Turn role")
    content: str = Field(..., description="Turn content")


class ChatRequest(BaseModel):
    """Inbound body of the chat endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[ConversationTurn] = Field(..., min_length=1, description="Conversation so far")
    session_id: Optional[str] = Field(default=None, alias="sessionId", description="Caller-held session token")


class Session(BaseModel):
    """Represents the state of one player's game."""
    session_id: str = Field(..., description="Session identifier issued to the front end")
    secret_word: Optional[str] = Field(default=None, description="Word chosen for the current game")
    questions_asked: int = Field(default=0, ge=0, description="Turns processed in the current game")
    won: bool = Field(default=False, description="Whether the prize has been issued")
    phase: GamePhase = Field(default=GamePhase.ACTIVE)
    max_questions: int = Field(default=config.MAX_QUESTIONS)

    # Prize workflow outcome
    recipient_address: Optional[str] = Field(default=None)
    transaction_id: Optional[str] = Field(default=None)
    transaction_hash: Optional[str] = Field(default=None)
    prize_status: Literal["none", "pending", "confirmed", "unknown"] = Field(default="none")

    created_at: datetime = Field(default_factory=datetime.now)
    last_active: datetime = Field(default_factory=datetime.now)


class PrizeRequest(BaseModel):
    """A single mint call for a confirmed win. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    recipient_address: str
    contract_address: str = config.CONTRACT_ADDRESS
    chain_id: int = config.CHAIN_ID
    function_signature: str = config.FUNCTION_SIGNATURE


class TransactionRecord(BaseModel):
    """Transaction created by the minting service."""
    transaction_id: str
    transaction_hash: Optional[str] = None
