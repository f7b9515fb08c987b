"""Tests for secret word generation."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage

from app.config import config
from app.game.words import make_word_provider
from app.session_store import SessionStore


class TestWordProvider:
    @pytest.mark.asyncio
    async def test_uses_model_reply(self):
        model = MagicMock()
        model.ainvoke = AsyncMock(return_value=AIMessage(content="Lighthouse."))

        word = await SessionStore().ensure_secret_word("p", make_word_provider(model))

        assert word == "lighthouse"
        messages = model.ainvoke.call_args.args[0]
        assert messages[0].type == "system"
        assert "single word" in messages[0].content

    @pytest.mark.asyncio
    async def test_model_construction_failure_falls_back(self):
        with patch("app.game.words.create_word_model", side_effect=ValueError("no api key")):
            word = await SessionStore().ensure_secret_word("p", make_word_provider())

        assert word == config.DEFAULT_SECRET_WORD
