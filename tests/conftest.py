"""Shared fixtures: fake model, fake minting client, fresh session store."""

from unittest.mock import MagicMock

import pytest

from app.minting import SyndicateClient
from app.session_store import SessionStore
from app.services.turn_service import TurnService
from tests.helpers import FakeChatModel, make_response


@pytest.fixture()
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture()
def fake_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture()
def minting_client() -> MagicMock:
    client = MagicMock(spec=SyndicateClient)
    client.send_transaction.return_value = make_response(200, {"transactionId": "tx-123"})
    client.get_transaction_request.return_value = {"transactionAttempts": [{"hash": "0xdead"}]}
    return client


@pytest.fixture()
def service(store: SessionStore, minting_client: MagicMock, fake_model: FakeChatModel) -> TurnService:
    return TurnService(
        store=store,
        minting_client=minting_client,
        model_factory=lambda: fake_model,
        word_provider=None,
        poll_interval=0.01,
        confirm_deadline=1.0,
        confirm_max_attempts=None,
    )
