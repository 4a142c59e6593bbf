from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class MissingSignerError(ValueError):
    """A write was attempted without a usable signer.

    This is a caller bug, raised before any network access.
    """


class TransactionError(RuntimeError):
    """Base for failures of an orchestrated write.

    ``cause`` is the underlying exception, ``run`` the failed ``IntentRun``
    once the orchestrator has recorded it.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.method = method
        self.run: Any = None


@runtime_checkable
class Signer(Protocol):
    """Anything bound to one address that can sign a transaction dict.

    ``eth_account.signers.local.LocalAccount`` satisfies this.
    """

    address: str

    def sign_transaction(self, transaction_dict: dict) -> Any:
        ...


def require_signer(signer: Any, method: str) -> Signer:
    if signer is None:
        raise MissingSignerError(f"{method} requires a signer")
    if not getattr(signer, "address", None) or not callable(
        getattr(signer, "sign_transaction", None)
    ):
        raise MissingSignerError(
            f"{method} requires a signer with an address and sign_transaction()"
        )
    return signer


@dataclass(frozen=True)
class TransactionIntent:
    """One pending write. Lives only for a single orchestrated call."""

    contract_address: str
    method: str
    args: tuple
    signer: Signer
    calldata: str

    @property
    def sender(self) -> str:
        return self.signer.address

    def call_params(self) -> dict[str, str]:
        """The exact call, as sent to ``eth_estimateGas``."""
        return {
            "from": self.sender,
            "to": self.contract_address,
            "data": self.calldata,
        }
