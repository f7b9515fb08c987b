"""Syndicate transaction API integration: prize issuing and confirmation."""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import requests

from app.config import config
from app.models import PrizeRequest, TransactionRecord

logger = logging.getLogger(__name__)


class MintingError(Exception):
    """Base class for minting service failures."""


class IssueError(MintingError):
    """The mint call failed; terminal for this claim attempt."""

    def __init__(self, message: str, detail: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code


class ConfirmTimeout(MintingError):
    """No transaction hash was observed within the polling bound."""

    def __init__(self, transaction_id: str, attempts: int, elapsed: float):
        super().__init__(
            f"Transaction {transaction_id} not confirmed after {attempts} attempts ({elapsed:.1f}s)"
        )
        self.transaction_id = transaction_id
        self.attempts = attempts
        self.elapsed = elapsed


class SyndicateClient:
    """Client for the Syndicate transaction API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        project_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else config.SYNDICATE_API_KEY
        self.project_id = project_id if project_id is not None else config.SYNDICATE_PROJECT_ID
        self.base_url = (base_url or config.SYNDICATE_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.SYNDICATE_TIMEOUT_SECONDS

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def build_payload(self, prize: PrizeRequest) -> Dict[str, Any]:
        """Body of a sendTransaction call for one prize."""
        return {
            "projectId": self.project_id,
            "contractAddress": prize.contract_address,
            "chainId": prize.chain_id,
            "functionSignature": prize.function_signature,
            "args": {
                "account": prize.recipient_address
            }
        }

    def send_transaction(self, prize: PrizeRequest) -> requests.Response:
        """
        Submit the mint call.

        Args:
            prize: Mint call description

        Returns:
            Raw HTTP response (status not checked here)
        """
        url = f"{self.base_url}/transact/sendTransaction"
        return requests.post(url, json=self.build_payload(prize), headers=self._headers(), timeout=self.timeout)

    def get_transaction_request(self, transaction_id: str) -> Dict[str, Any]:
        """
        Fetch the request record for a submitted transaction.

        Raises:
            requests.exceptions.RequestException: On transport or HTTP errors
            ValueError: If the body is not JSON
        """
        url = f"{self.base_url}/wallet/project/{self.project_id}/request/{transaction_id}"
        response = requests.get(url, headers={"Authorization": f"Bearer {self.api_key}"}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


def extract_transaction_hash(data: Dict[str, Any]) -> Optional[str]:
    """Return the first attempt's hash, or None while it is not available."""
    attempts = data.get("transactionAttempts") if isinstance(data, dict) else None
    if not isinstance(attempts, list) or not attempts or not isinstance(attempts[0], dict):
        return None
    transaction_hash = attempts[0].get("hash")
    return transaction_hash if isinstance(transaction_hash, str) and transaction_hash else None


async def issue_prize(client: SyndicateClient, recipient_address: str) -> TransactionRecord:
    """
    Ask the minting service to mint the prize for a recipient. Single attempt.

    Args:
        client: Syndicate API client
        recipient_address: Address receiving the token

    Returns:
        TransactionRecord carrying the new transaction id

    Raises:
        IssueError: Non-success status, network failure or unusable body
    """
    prize = PrizeRequest(recipient_address=recipient_address)
    logger.info(f"🎁 Sending prize to {recipient_address}")

    try:
        response = await asyncio.to_thread(client.send_transaction, prize)
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Network error sending prize: {e}")
        raise IssueError("Network error calling the minting service", detail=str(e)) from e

    try:
        response_data = response.json()
    except ValueError:
        response_data = response.text

    if not response.ok:
        logger.error(f"❌ Minting service rejected transaction ({response.status_code}): {response_data}")
        raise IssueError(
            f"Minting service returned {response.status_code}",
            detail=response_data,
            status_code=response.status_code
        )

    transaction_id = response_data.get("transactionId") if isinstance(response_data, dict) else None
    if not transaction_id:
        logger.error(f"❌ Minting response missing transactionId: {response_data}")
        raise IssueError("Minting response missing transactionId", detail=response_data, status_code=response.status_code)

    logger.info(f"✅ Prize transaction created: {transaction_id}")
    return TransactionRecord(transaction_id=transaction_id)


async def confirm_transaction(
    client: SyndicateClient,
    transaction_id: str,
    poll_interval: float = config.CONFIRM_POLL_INTERVAL_SECONDS,
    deadline: float = config.CONFIRM_DEADLINE_SECONDS,
    max_attempts: Optional[int] = config.CONFIRM_MAX_ATTEMPTS,
) -> str:
    """
    Poll the minting service until the transaction hash is available.

    Failed polls are logged and retried after poll_interval. The loop stops
    once deadline seconds have elapsed or max_attempts polls were made.

    Returns:
        The on-chain transaction hash

    Raises:
        ConfirmTimeout: No hash within the bound
        asyncio.CancelledError: The caller went away mid-poll
    """
    started = time.monotonic()
    attempts = 0

    while True:
        attempts += 1
        try:
            data = await asyncio.to_thread(client.get_transaction_request, transaction_id)
            transaction_hash = extract_transaction_hash(data)
            if transaction_hash:
                logger.info(f"✅ Transaction {transaction_id} confirmed after {attempts} attempts: {transaction_hash}")
                return transaction_hash
            logger.info(f"⏳ Transaction {transaction_id} has no hash yet (attempt {attempts})")
        except (requests.exceptions.RequestException, ValueError, AttributeError, KeyError, TypeError, IndexError) as e:
            logger.warning(f"⚠️ Error getting transaction details (attempt {attempts}): {e}")

        elapsed = time.monotonic() - started
        if max_attempts is not None and attempts >= max_attempts:
            raise ConfirmTimeout(transaction_id, attempts, elapsed)
        if elapsed + poll_interval > deadline:
            raise ConfirmTimeout(transaction_id, attempts, elapsed)

        await asyncio.sleep(poll_interval)
