"""
Fee Estimator - gas limit and gas price for one write.

Both the raw gas estimate and the current gas price are inflated by fixed
multipliers, trading some overpayment for fewer out-of-gas and
stuck-unmined transactions. Quotes are computed per intent and never
cached. No upper bound is applied to the resulting fee.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .intent import TransactionError, TransactionIntent
from .rpc import EndpointError, JsonRpcEndpoint, RpcError

logger = logging.getLogger(__name__)

GAS_LIMIT_MULTIPLIER = Decimal("1.15")
GAS_PRICE_MULTIPLIER = Decimal("1.5")


class EstimationError(TransactionError):
    """The call would revert on-chain, or the endpoint failed while quoting."""

    @property
    def reverted(self) -> bool:
        return isinstance(self.cause, RpcError) and self.cause.is_revert


@dataclass(frozen=True)
class FeeQuote:
    gas_limit: int
    gas_price: int

    def as_tx_fields(self) -> dict[str, int]:
        return {"gas": self.gas_limit, "gasPrice": self.gas_price}


def inflate(value: int, multiplier: Decimal) -> int:
    """``value * multiplier`` rounded half-up to an integer, without float error."""
    with localcontext() as ctx:
        # wide enough for any uint256 times a small multiplier
        ctx.prec = 100
        return int((Decimal(value) * multiplier).to_integral_value(rounding=ROUND_HALF_UP))


class FeeEstimator:
    def __init__(
        self,
        endpoint: JsonRpcEndpoint,
        gas_limit_multiplier: Decimal = GAS_LIMIT_MULTIPLIER,
        gas_price_multiplier: Decimal = GAS_PRICE_MULTIPLIER,
    ) -> None:
        self.endpoint = endpoint
        self.gas_limit_multiplier = gas_limit_multiplier
        self.gas_price_multiplier = gas_price_multiplier

    def estimate(self, intent: TransactionIntent) -> FeeQuote:
        """
        Quote gas for ``intent`` exactly as it will be sent.

        Raises:
            EstimationError: If either query fails, including a revert
                during gas estimation (e.g. a duplicate createAgent)
        """
        try:
            raw_gas = self.endpoint.estimate_gas(intent.call_params())
        except EndpointError as exc:
            raise EstimationError(
                f"Gas estimation for {intent.method} failed: {exc}", exc, intent.method
            ) from exc

        try:
            raw_price = self.endpoint.gas_price()
        except EndpointError as exc:
            raise EstimationError(
                f"Gas price lookup for {intent.method} failed: {exc}", exc, intent.method
            ) from exc

        quote = FeeQuote(
            gas_limit=inflate(raw_gas, self.gas_limit_multiplier),
            gas_price=inflate(raw_price, self.gas_price_multiplier),
        )
        logger.debug(
            "Fee quote for %s: gas %d -> %d, price %d -> %d",
            intent.method,
            raw_gas,
            quote.gas_limit,
            raw_price,
            quote.gas_price,
        )
        return quote
