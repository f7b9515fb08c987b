"""Tests for the Syndicate client, prize issuing and confirmation polling."""

import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.config import config
from app.minting import (
    ConfirmTimeout,
    IssueError,
    SyndicateClient,
    confirm_transaction,
    extract_transaction_hash,
    issue_prize,
)
from app.models import PrizeRequest
from tests.helpers import ADDRESS, make_response


@pytest.fixture()
def client() -> SyndicateClient:
    return SyndicateClient(api_key="test-key", project_id="proj-1", base_url="https://syndicate.test/", timeout=3)


class TestSyndicateClient:
    def test_payload_matches_mint_call(self, client: SyndicateClient):
        payload = client.build_payload(PrizeRequest(recipient_address=ADDRESS))

        assert payload == {
            "projectId": "proj-1",
            "contractAddress": config.CONTRACT_ADDRESS,
            "chainId": 80001,
            "functionSignature": "mint(address account)",
            "args": {"account": ADDRESS},
        }

    def test_send_transaction_posts_with_bearer_auth(self, client: SyndicateClient):
        with patch("app.minting.requests.post", return_value=make_response(200, {})) as post:
            client.send_transaction(PrizeRequest(recipient_address=ADDRESS))

        url = post.call_args.args[0]
        assert url == "https://syndicate.test/transact/sendTransaction"
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert post.call_args.kwargs["json"]["args"] == {"account": ADDRESS}

    def test_get_transaction_request_url(self, client: SyndicateClient):
        with patch("app.minting.requests.get", return_value=make_response(200, {"transactionAttempts": []})) as get:
            data = client.get_transaction_request("tx-9")

        assert get.call_args.args[0] == "https://syndicate.test/wallet/project/proj-1/request/tx-9"
        assert data == {"transactionAttempts": []}


def test_extract_transaction_hash():
    assert extract_transaction_hash({"transactionAttempts": [{"hash": "0xdead"}]}) == "0xdead"
    assert extract_transaction_hash({"transactionAttempts": [{"hash": ""}]}) is None
    assert extract_transaction_hash({"transactionAttempts": []}) is None
    assert extract_transaction_hash({}) is None
    assert extract_transaction_hash({"transactionAttempts": {"hash": "0xdead"}}) is None
    assert extract_transaction_hash({"transactionAttempts": 7}) is None


class TestIssuePrize:
    @pytest.mark.asyncio
    async def test_success_returns_transaction_id(self, client: SyndicateClient):
        with patch("app.minting.requests.post", return_value=make_response(200, {"transactionId": "tx-1"})) as post:
            record = await issue_prize(client, ADDRESS)

        assert record.transaction_id == "tx-1"
        assert record.transaction_hash is None
        post.assert_called_once()

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self, client: SyndicateClient):
        body = {"error": "insufficient funds"}
        with patch("app.minting.requests.post", return_value=make_response(500, body)) as post:
            with pytest.raises(IssueError) as excinfo:
                await issue_prize(client, ADDRESS)

        assert excinfo.value.status_code == 500
        assert excinfo.value.detail == body
        post.assert_called_once()

    @pytest.mark.asyncio
    async def test_network_error_raises_without_retry(self, client: SyndicateClient):
        with patch("app.minting.requests.post", side_effect=requests.exceptions.ConnectionError("down")) as post:
            with pytest.raises(IssueError):
                await issue_prize(client, ADDRESS)

        post.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_transaction_id_raises(self, client: SyndicateClient):
        with patch("app.minting.requests.post", return_value=make_response(200, {"status": "ok"})):
            with pytest.raises(IssueError):
                await issue_prize(client, ADDRESS)


class TestConfirmTransaction:
    @pytest.mark.asyncio
    async def test_returns_hash_after_retries(self):
        client = MagicMock(spec=SyndicateClient)
        client.get_transaction_request.side_effect = [
            requests.exceptions.Timeout("slow"),
            {"transactionAttempts": []},
            {"transactionAttempts": [{"hash": "0xdead"}]},
        ]

        tx_hash = await confirm_transaction(client, "tx-1", poll_interval=0.01, deadline=5)

        assert tx_hash == "0xdead"
        assert client.get_transaction_request.call_count == 3

    @pytest.mark.asyncio
    async def test_malformed_body_is_retried(self):
        client = MagicMock(spec=SyndicateClient)
        client.get_transaction_request.side_effect = [
            ["not", "a", "dict"],
            {"transactionAttempts": [{"hash": "0xbeef"}]},
        ]

        assert await confirm_transaction(client, "tx-1", poll_interval=0.01, deadline=5) == "0xbeef"

    @pytest.mark.asyncio
    async def test_deadline_bounds_a_service_that_never_confirms(self):
        client = MagicMock(spec=SyndicateClient)
        client.get_transaction_request.return_value = {"transactionAttempts": []}

        started = time.monotonic()
        with pytest.raises(ConfirmTimeout) as excinfo:
            await confirm_transaction(client, "tx-1", poll_interval=0.02, deadline=0.2)
        elapsed = time.monotonic() - started

        assert elapsed < 1.0
        assert excinfo.value.transaction_id == "tx-1"
        assert excinfo.value.attempts >= 2

    @pytest.mark.asyncio
    async def test_max_attempts_bounds_polling(self):
        client = MagicMock(spec=SyndicateClient)
        client.get_transaction_request.return_value = {"transactionAttempts": []}

        with pytest.raises(ConfirmTimeout) as excinfo:
            await confirm_transaction(client, "tx-1", poll_interval=0.01, deadline=60, max_attempts=3)

        assert excinfo.value.attempts == 3
        assert client.get_transaction_request.call_count == 3

    @pytest.mark.asyncio
    async def test_attempts_of_the_wrong_type_are_retried(self):
        client = MagicMock(spec=SyndicateClient)
        client.get_transaction_request.side_effect = [
            {"transactionAttempts": {"hash": "0xdead"}},
            {"transactionAttempts": 3},
            {"transactionAttempts": [{"hash": "0xcafe"}]},
        ]

        assert await confirm_transaction(client, "tx-1", poll_interval=0.01, deadline=5) == "0xcafe"
        assert client.get_transaction_request.call_count == 3
