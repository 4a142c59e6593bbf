from __future__ import annotations

from eth_hash.auto import keccak

ZERO_ADDRESS = "0x" + "0" * 40


def keccak256_bytes(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256; hashlib.sha3_256 gives different digests.
    return keccak(data)


def keccak256(text: str) -> str:
    return "0x" + keccak256_bytes(text.encode("utf-8")).hex()


def to_checksum_address(address: str) -> str:
    """EIP-55 checksum; eth-account rejects lowercase ``to`` fields."""
    addr = address.lower().replace("0x", "")
    if len(addr) != 40:
        raise ValueError(f"Not a 20-byte address: {address!r}")
    addr_hash = keccak256_bytes(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def normalize_agent_id(agent_id: str | int) -> int:
    """Convert an agent id handle to the ``uint256`` the registry stores.

    Accepts ``0x``-prefixed hex strings (the usual form, e.g. a keccak256
    digest) or plain non-negative ints.
    """
    if isinstance(agent_id, bool):
        raise ValueError("agent_id must be a hex string or int")
    if isinstance(agent_id, int):
        value = agent_id
    elif isinstance(agent_id, str):
        text = agent_id.strip()
        if not text:
            raise ValueError("agent_id must be non-empty string")
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise ValueError(f"agent_id is not a valid hex or decimal id: {agent_id!r}") from None
    else:
        raise ValueError("agent_id must be a hex string or int")

    if value < 0 or value >= 2**256:
        raise ValueError(f"agent_id out of uint256 range: {agent_id!r}")
    return value


def format_agent_id(value: int) -> str:
    return hex(value)
