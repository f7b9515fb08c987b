"""Groq model factories for the game

Plain text conversation models, no structured output.
"""

import logging
from langchain_groq import ChatGroq

from app.config import config

logger = logging.getLogger(__name__)


def create_game_model() -> ChatGroq:
    """Create the question-answering model (streamed, terse)

    Returns:
        ChatGroq model configured for yes/no answers
    """
    try:
        model = ChatGroq(
            model=config.GROQ_MODEL,
            temperature=config.GAME_TEMPERATURE,
            max_tokens=config.GAME_MAX_TOKENS,  # Short cap keeps answers to a line
            streaming=True,
        )

        logger.info(f"✅ Game model initialized ({config.GROQ_MODEL})")
        return model

    except Exception as e:
        logger.exception(f"❌ Failed to initialize game model: {e}")
        raise


def create_word_model() -> ChatGroq:
    """Create the secret-word picker

    Higher temperature so consecutive games get different words.

    Returns:
        ChatGroq model for single-word replies
    """
    try:
        model = ChatGroq(
            model=config.GROQ_MODEL,
            temperature=config.WORD_TEMPERATURE,
            max_tokens=8,
        )

        logger.info("✅ Word model initialized")
        return model

    except Exception as e:
        logger.exception(f"❌ Failed to initialize word model: {e}")
        raise
