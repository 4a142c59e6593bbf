"""
Registry interface description - loading, validation, and call encoding.

The AgentRegistry ABI ships with the package (``artifacts/``) in the same
``{"abi": [...]}`` layout as a compiler artifact. Before a binding uses an
ABI it is checked twice: the document shape against ``abi.schema.json``,
then the methods the client relies on against ``EXPECTED_INTERFACE``, so a
drifted interface fails at startup instead of at the first call.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from eth_abi import decode, encode

from ..utils import keccak256_bytes

ARTIFACTS_DIR = Path(__file__).resolve().parent / "artifacts"

REGISTRY_CONTRACT = "AgentRegistry"

# method -> (input types, output types)
EXPECTED_INTERFACE: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "getAgent": (("uint256",), ("bool", "address", "uint256", "string", "uint256[]")),
    "isEnabled": (("uint256",), ("bool",)),
    "createAgent": (("uint256", "address", "string", "uint256[]"), ()),
    "updateAgent": (("uint256", "string", "uint256[]"), ()),
    "enableAgent": (("uint256", "uint8"), ()),
    "disableAgent": (("uint256", "uint8"), ()),
}


class AbiError(ValueError):
    pass


class InterfaceMismatchError(AbiError):
    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems = problems or []


def _read_artifact(contract_name: str) -> dict[str, Any]:
    path = ARTIFACTS_DIR / f"{contract_name}.json"
    if not path.exists():
        raise FileNotFoundError(f"ABI not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def _abi_validator() -> jsonschema.Validator:
    with (ARTIFACTS_DIR / "abi.schema.json").open("r", encoding="utf-8") as f:
        schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def validate_abi_document(abi: Any) -> None:
    """Raise ``AbiError`` if ``abi`` is not a well-formed ABI list."""
    errors = sorted(_abi_validator().iter_errors(abi), key=lambda e: [str(p) for p in e.path])
    if errors:
        formatted = []
        for err in errors:
            location = "/".join(str(p) for p in err.path) or "<root>"
            formatted.append(f"{location}: {err.message}")
        raise AbiError("Invalid ABI document: " + "; ".join(formatted))


@lru_cache(maxsize=8)
def _load_abi_cached(contract_name: str) -> tuple[dict[str, Any], ...]:
    abi = _read_artifact(contract_name)["abi"]
    validate_abi_document(abi)
    return tuple(abi)


def load_abi(contract_name: str = REGISTRY_CONTRACT) -> list[dict[str, Any]]:
    """
    Load and shape-check a packaged ABI.

    Raises:
        FileNotFoundError: If no artifact exists for ``contract_name``
        AbiError: If the artifact's ABI is malformed
    """
    return list(_load_abi_cached(contract_name))


def find_function(abi: list[dict[str, Any]], function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise AbiError(f"Function {function_name} not found in ABI")


def _types(params: list[dict[str, Any]]) -> tuple[str, ...]:
    return tuple(p["type"] for p in params)


def check_interface(
    abi: list[dict[str, Any]],
    expected: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = EXPECTED_INTERFACE,
) -> None:
    """Fail fast if ``abi`` lacks a method or its argument/return types drifted."""
    validate_abi_document(abi)
    problems = []
    for name, (inputs, outputs) in expected.items():
        try:
            func = find_function(abi, name)
        except AbiError:
            problems.append(f"{name}: missing")
            continue
        actual_inputs = _types(func.get("inputs", []))
        actual_outputs = _types(func.get("outputs", []))
        if actual_inputs != inputs:
            problems.append(f"{name}: inputs {actual_inputs} != expected {inputs}")
        if actual_outputs != outputs:
            problems.append(f"{name}: outputs {actual_outputs} != expected {outputs}")

    if problems:
        raise InterfaceMismatchError(
            "Registry interface does not match the expected shape: " + "; ".join(problems),
            problems,
        )


def function_signature(func: dict[str, Any]) -> str:
    return f"{func['name']}({','.join(_types(func.get('inputs', [])))})"


def function_selector(func: dict[str, Any]) -> bytes:
    return keccak256_bytes(function_signature(func).encode("utf-8"))[:4]


def encode_call(abi: list[dict[str, Any]], function_name: str, args: list) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = find_function(abi, function_name)
    input_types = list(_types(func.get("inputs", [])))
    if len(args) != len(input_types):
        raise AbiError(
            f"{function_name} takes {len(input_types)} arguments, got {len(args)}"
        )

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + function_selector(func).hex() + encoded_args.hex()


def decode_result(abi: list[dict[str, Any]], function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        A single value for one output, otherwise a tuple
    """
    func = find_function(abi, function_name)
    output_types = list(_types(func.get("outputs", [])))
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
