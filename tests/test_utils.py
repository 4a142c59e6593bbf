"""Unit tests for utils.py functions."""

from __future__ import annotations

import pytest

from registrum.models import AgentRecord
from registrum.utils import (
    ZERO_ADDRESS,
    format_agent_id,
    keccak256,
    normalize_agent_id,
    to_checksum_address,
)


class TestKeccak256:
    def test_empty_string(self) -> None:
        # Keccak-256 of empty input, distinct from NIST SHA3-256
        assert keccak256("") == "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_shape(self) -> None:
        result = keccak256("my-agent")
        assert result.startswith("0x")
        assert len(result) == 66
        assert result == result.lower()

    def test_deterministic(self) -> None:
        assert keccak256("my-agent") == keccak256("my-agent")
        assert keccak256("my-agent") != keccak256("my-agent-2")


class TestChecksumAddress:
    def test_eip55_vectors(self) -> None:
        for expected in (
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
            "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
            "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
        ):
            assert to_checksum_address(expected.lower()) == expected

    def test_zero_address(self) -> None:
        assert to_checksum_address(ZERO_ADDRESS) == ZERO_ADDRESS

    def test_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            to_checksum_address("0x1234")


class TestNormalizeAgentId:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("0xabc", 0xABC),
            ("0xABC", 0xABC),
            ("  0xabc ", 0xABC),
            ("2748", 2748),
            (2748, 2748),
            ("0x" + "f" * 64, 2**256 - 1),
        ],
    )
    def test_valid(self, value, expected: int) -> None:
        assert normalize_agent_id(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "0xzz", "agent", -1, 2**256, "0x1" + "0" * 64, True, None, 1.5],
    )
    def test_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            normalize_agent_id(value)

    def test_format_round_trip(self) -> None:
        assert format_agent_id(normalize_agent_id("0xabc")) == "0xabc"


class TestAgentRecord:
    def test_from_call_result(self) -> None:
        owner = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        record = AgentRecord.from_call_result(0xABC, (True, owner, 2, "ipfs://ref1", [1, 137]))
        assert record.to_dict() == {
            "agentId": "0xabc",
            "created": True,
            "owner": owner,
            "metadata": "ipfs://ref1",
            "version": 2,
            "chainIds": [1, 137],
        }

    def test_owner_is_checksummed(self) -> None:
        # eth-abi decodes addresses as lowercase hex
        owner = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        record = AgentRecord.from_call_result(0xABC, (True, owner.lower(), 1, "ipfs://ref1", [1]))
        assert record.owner == owner

    def test_zero_value_result(self) -> None:
        record = AgentRecord.from_call_result(0xABC, (False, ZERO_ADDRESS, 0, "", []))
        assert not record.created
        assert record.owner == ZERO_ADDRESS
        assert record.chain_ids == ()
