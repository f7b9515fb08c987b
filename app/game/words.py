"""Secret word generation backed by the word model."""

import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from app.session_store import WordProvider
from .models.groq_client import create_word_model
from .prompts import get_word_generation_prompt

logger = logging.getLogger(__name__)


def make_word_provider(model: Optional[Any] = None) -> WordProvider:
    """Build the async callable SessionStore.ensure_secret_word expects.

    The model is created lazily so a missing API key only surfaces as a
    provider failure (and the store's default word), never at startup.
    """

    async def provide_word() -> str:
        llm = model or create_word_model()
        response = await llm.ainvoke([
            SystemMessage(content=get_word_generation_prompt()),
            HumanMessage(content="Pick the secret word now."),
        ])
        content = response.content if isinstance(response.content, str) else str(response.content)
        logger.info("🎲 Word model returned a candidate")
        return content

    return provide_word
