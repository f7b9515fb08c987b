"""Prompt Node - prepares the model call for an ordinary question"""

import logging
from typing import Dict, Any
from langgraph.runtime import Runtime

from ..state import TurnState
from ..context import TurnContext
from ..prompts import get_game_system_prompt, word_fits_prompt

logger = logging.getLogger(__name__)


async def compose_prompt_node(state: TurnState, *, runtime: Runtime[TurnContext]) -> Dict[str, Any]:
    """Prepend a fresh system turn to the conversation

    The secret word is picked on the first question of a game.
    """
    context = runtime.context
    session = state["session"]

    secret_word = await context.store.ensure_secret_word(
        context.session_id, context.word_provider, is_usable=word_fits_prompt
    )
    system_turn = get_game_system_prompt(secret_word, session.questions_asked, session.max_questions)

    logger.info(f"📝 Prompt composed for {context.masked_id} ({len(state.get('turns', []))} turns)")
    return {
        "workflow_step": "prompt_composed",
        "prompt_turns": [system_turn, *state.get("turns", [])]
    }
