"""Turn service: runs the game workflow for one inbound turn and relays the answer."""

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app import analytics
from app.config import config
from app.minting import SyndicateClient
from app.models import ConversationTurn
from app.session_store import SessionStore, WordProvider, mask_session_id
from app.game.context import TurnContext
from app.game.models.groq_client import create_game_model
from app.game.prompts import MODEL_ERROR_MESSAGE
from app.game.win_detector import is_win_announcement
from app.game.workflow import create_turn_agent

logger = logging.getLogger(__name__)

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def to_langchain_messages(turns: Sequence[Dict[str, str]]) -> List[BaseMessage]:
    """Convert {"role", "content"} turns to LangChain messages."""
    return [_MESSAGE_TYPES[turn["role"]](content=turn["content"]) for turn in turns]


@dataclass
class TurnResult:
    """Reply for one turn: a fixed text or a token stream, never both."""
    session_id: str
    workflow_step: str
    text: Optional[str] = None
    stream: Optional[AsyncIterator[str]] = None


class TurnService:
    """Session orchestrator for the chat endpoint."""

    def __init__(
        self,
        store: SessionStore,
        minting_client: SyndicateClient,
        model_factory: Callable[[], Any] = create_game_model,
        word_provider: Optional[WordProvider] = None,
        poll_interval: float = config.CONFIRM_POLL_INTERVAL_SECONDS,
        confirm_deadline: float = config.CONFIRM_DEADLINE_SECONDS,
        confirm_max_attempts: Optional[int] = config.CONFIRM_MAX_ATTEMPTS,
    ):
        """
        Initialize turn service.

        Args:
            store: Keyed session state
            minting_client: Syndicate API client
            model_factory: Builds the streaming chat model
            word_provider: Secret word generator (default word if None)
            poll_interval: Seconds between confirmation polls
            confirm_deadline: Wall-clock bound for confirmation polling
            confirm_max_attempts: Optional bound on the number of polls
        """
        self.store = store
        self.minting_client = minting_client
        self.model_factory = model_factory
        self.word_provider = word_provider
        self.poll_interval = poll_interval
        self.confirm_deadline = confirm_deadline
        self.confirm_max_attempts = confirm_max_attempts
        self.agent = create_turn_agent()

    async def handle_turn(self, session_id: str, turns: Sequence[ConversationTurn]) -> TurnResult:
        """
        Process one inbound turn.

        Args:
            session_id: Caller-held session token
            turns: Full conversation so far, latest player turn last

        Returns:
            TurnResult with either text or a stream of answer tokens
        """
        context = TurnContext(
            session_id=session_id,
            store=self.store,
            minting_client=self.minting_client,
            word_provider=self.word_provider,
            poll_interval=self.poll_interval,
            confirm_deadline=self.confirm_deadline,
            confirm_max_attempts=self.confirm_max_attempts
        )

        result = await self.agent.ainvoke(
            {
                "turns": [{"role": turn.role, "content": turn.content} for turn in turns],
                "session": None,
                "response_text": None,
                "prompt_turns": None,
                "recipient_address": None,
                "transaction_id": None,
                "transaction_hash": None,
                "issue_error": None,
                "workflow_step": "start"
            },
            context=context
        )

        workflow_step = result.get("workflow_step", "unknown")
        logger.info(f"✅ Turn workflow for {mask_session_id(session_id)} finished at '{workflow_step}'")

        if result.get("response_text"):
            return TurnResult(session_id=session_id, workflow_step=workflow_step, text=result["response_text"])

        return TurnResult(
            session_id=session_id,
            workflow_step=workflow_step,
            stream=self._stream_answer(session_id, result["prompt_turns"])
        )

    async def _stream_answer(self, session_id: str, prompt_turns: Sequence[Dict[str, str]]) -> AsyncIterator[str]:
        """Relay the model's answer token by token.

        Once the answer is complete, a congratulatory reply opens the claim
        window for this session.
        """
        chunks: List[str] = []
        try:
            model = self.model_factory()
            async for chunk in model.astream(to_langchain_messages(prompt_turns)):
                text = chunk.content if isinstance(chunk.content, str) else ""
                if text:
                    chunks.append(text)
                    yield text
        except Exception as e:
            logger.exception(f"❌ Model completion failed for {mask_session_id(session_id)}: {e}")
            if not chunks:
                yield MODEL_ERROR_MESSAGE
            return

        answer = "".join(chunks)
        logger.info(f"🤖 Answer for {mask_session_id(session_id)}: {answer[:50]}{'...' if len(answer) > 50 else ''}")

        if is_win_announcement(answer):
            await self.store.mark_pending_claim(session_id)
            session = self.store.get(session_id)
            analytics.track_win_announced(session_id, session.questions_asked)
