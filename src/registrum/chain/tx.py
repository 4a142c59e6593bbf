"""
Transaction Orchestrator - run one write intent to completion.

Every intent moves through ESTIMATING -> SUBMITTING -> PENDING -> CONFIRMED,
or ends in FAILED from any of those. The only success exit is CONFIRMED,
returning the mined transaction's hash. Nothing is retried here: a failed
intent must be rebuilt and re-run by the caller, which re-estimates against
the current chain state.

Confirmation waiting is unbounded unless a ``confirmation_timeout`` is
given; an unmined transaction can block the calling thread indefinitely.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional, cast

from ..utils import to_checksum_address
from .fees import EstimationError, FeeEstimator, FeeQuote
from .intent import TransactionError, TransactionIntent
from .rpc import EndpointError, JsonRpcEndpoint

logger = logging.getLogger(__name__)


class SubmissionError(TransactionError):
    """Signing or broadcasting the transaction failed."""


class ConfirmationError(TransactionError):
    """The transaction was broadcast but never observed as successfully mined."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        method: str | None = None,
        tx_hash: str | None = None,
    ) -> None:
        super().__init__(message, cause, method)
        self.tx_hash = tx_hash


class TransactionRevertedError(ConfirmationError):
    """Mined with status 0."""

    def __init__(self, message: str, method: str, tx_hash: str, receipt: dict) -> None:
        super().__init__(message, None, method, tx_hash)
        self.receipt = receipt


class TxState(enum.Enum):
    ESTIMATING = "estimating"
    SUBMITTING = "submitting"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


_TRANSITIONS = {
    TxState.ESTIMATING: {TxState.SUBMITTING, TxState.FAILED},
    TxState.SUBMITTING: {TxState.PENDING, TxState.FAILED},
    TxState.PENDING: {TxState.CONFIRMED, TxState.FAILED},
    TxState.CONFIRMED: set(),
    TxState.FAILED: set(),
}


class IntentRun:
    """State of a single intent's journey. Never shared between intents."""

    def __init__(self, intent: TransactionIntent) -> None:
        self.intent = intent
        self.state = TxState.ESTIMATING
        self.history = [TxState.ESTIMATING]
        self.quote: Optional[FeeQuote] = None
        self.tx_hash: Optional[str] = None
        self.receipt: Optional[dict] = None
        self.error: Optional[TransactionError] = None

    def advance(self, state: TxState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.name} -> {state.name}")
        logger.debug("%s: %s -> %s", self.intent.method, self.state.name, state.name)
        self.state = state
        self.history.append(state)

    def fail(self, error: TransactionError) -> TransactionError:
        error.run = self
        self.error = error
        self.advance(TxState.FAILED)
        return error

    @property
    def confirmed(self) -> bool:
        return self.state is TxState.CONFIRMED


def _receipt_status(receipt: dict) -> int:
    status = receipt.get("status", "0x1")
    if isinstance(status, int):
        return status
    return int(status, 16)


class TransactionOrchestrator:
    def __init__(
        self,
        endpoint: JsonRpcEndpoint,
        chain_id: int,
        estimator: Optional[FeeEstimator] = None,
        confirmation_timeout: Optional[float] = None,
        poll_interval: float = 2.0,
    ) -> None:
        self.endpoint = endpoint
        self.chain_id = chain_id
        self.estimator = estimator or FeeEstimator(endpoint)
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

    def execute(self, intent: TransactionIntent) -> str:
        """Run ``intent`` and return the confirmed transaction hash."""
        return cast(str, self.run(intent).tx_hash)

    def run(self, intent: TransactionIntent) -> IntentRun:
        """
        Estimate, submit, and wait for ``intent``.

        Returns:
            The CONFIRMED ``IntentRun``

        Raises:
            EstimationError: Nothing was submitted
            SubmissionError: Signing, nonce lookup, or broadcast failed
            ConfirmationError: Lost the endpoint or gave up while waiting,
                or the transaction reverted when mined
        """
        run = IntentRun(intent)

        try:
            run.quote = self.estimator.estimate(intent)
        except EstimationError as exc:
            logger.warning("%s not submitted: %s", intent.method, exc)
            raise run.fail(exc)

        run.advance(TxState.SUBMITTING)
        try:
            run.tx_hash = self._submit(intent, run.quote)
        except SubmissionError as exc:
            logger.warning("%s submission failed: %s", intent.method, exc)
            raise run.fail(exc)

        run.advance(TxState.PENDING)
        logger.info("%s submitted: %s", intent.method, run.tx_hash)
        try:
            run.receipt = self._await_confirmation(intent, run.tx_hash)
        except ConfirmationError as exc:
            logger.warning("%s confirmation failed for %s: %s", intent.method, run.tx_hash, exc)
            raise run.fail(exc)

        run.advance(TxState.CONFIRMED)
        logger.info(
            "%s confirmed: %s (block %s)",
            intent.method,
            run.tx_hash,
            run.receipt.get("blockNumber"),
        )
        return run

    def build_transaction(self, intent: TransactionIntent, quote: FeeQuote, nonce: int) -> dict[str, Any]:
        tx: dict[str, Any] = {
            "to": to_checksum_address(intent.contract_address),
            "data": intent.calldata,
            "value": 0,
            "nonce": nonce,
            "chainId": self.chain_id,
        }
        tx.update(quote.as_tx_fields())
        return tx

    def _submit(self, intent: TransactionIntent, quote: FeeQuote) -> str:
        try:
            nonce = self.endpoint.transaction_count(intent.sender)
        except EndpointError as exc:
            raise SubmissionError(
                f"Nonce lookup for {intent.sender} failed: {exc}", exc, intent.method
            ) from exc

        tx = self.build_transaction(intent, quote, nonce)
        try:
            signed = intent.signer.sign_transaction(tx)
            raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        except Exception as exc:  # signer implementations raise arbitrary types
            raise SubmissionError(
                f"Signing {intent.method} failed: {exc}", exc, intent.method
            ) from exc

        try:
            tx_hash = self.endpoint.send_raw_transaction(raw_tx)
        except EndpointError as exc:
            raise SubmissionError(
                f"Broadcasting {intent.method} failed: {exc}", exc, intent.method
            ) from exc
        if not isinstance(tx_hash, str) or not tx_hash.startswith("0x"):
            raise SubmissionError(
                f"Broadcasting {intent.method} returned no transaction hash: {tx_hash!r}",
                method=intent.method,
            )
        return tx_hash

    def _await_confirmation(self, intent: TransactionIntent, tx_hash: str) -> dict:
        try:
            receipt = self.endpoint.wait_for_receipt(
                tx_hash,
                timeout=self.confirmation_timeout,
                poll_interval=self.poll_interval,
            )
        except EndpointError as exc:
            raise ConfirmationError(
                f"Waiting for {tx_hash} failed: {exc}", exc, intent.method, tx_hash
            ) from exc

        if _receipt_status(receipt) != 1:
            raise TransactionRevertedError(
                f"{intent.method} transaction {tx_hash} reverted", intent.method, tx_hash, receipt
            )
        return receipt
