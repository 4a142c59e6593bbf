__all__ = [
    # Facade
    "AgentRegistry",
    "AgentRecord",
    "Permission",
    "RegistryConfig",
    # Chain layer
    "JsonRpcEndpoint",
    "RegistryContract",
    "FeeEstimator",
    "FeeQuote",
    "TransactionIntent",
    "TransactionOrchestrator",
    "IntentRun",
    "TxState",
    # Errors
    "EndpointError",
    "RpcError",
    "ReceiptTimeout",
    "MissingSignerError",
    "TransactionError",
    "EstimationError",
    "SubmissionError",
    "ConfirmationError",
    "TransactionRevertedError",
    "AbiError",
    "InterfaceMismatchError",
    "ConfigError",
]

from .chain.abi import AbiError, InterfaceMismatchError
from .chain.contract import RegistryContract
from .chain.fees import EstimationError, FeeEstimator, FeeQuote
from .chain.intent import MissingSignerError, TransactionError, TransactionIntent
from .chain.rpc import EndpointError, JsonRpcEndpoint, ReceiptTimeout, RpcError
from .chain.tx import (
    ConfirmationError,
    IntentRun,
    SubmissionError,
    TransactionOrchestrator,
    TransactionRevertedError,
    TxState,
)
from .config import ConfigError, RegistryConfig
from .models import AgentRecord, Permission
from .registry import AgentRegistry
