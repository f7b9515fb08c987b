"""Groq model factories"""

from .groq_client import create_game_model, create_word_model

__all__ = [
    "create_game_model",
    "create_word_model"
]
