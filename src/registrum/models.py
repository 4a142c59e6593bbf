from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .utils import format_agent_id, to_checksum_address


class Permission(enum.IntEnum):
    """On whose authority an enable/disable is performed.

    Passed verbatim to the contract as ``uint8``.
    """

    OWNER = 1


@dataclass(frozen=True)
class AgentRecord:
    agent_id: str
    created: bool
    owner: str
    metadata: str
    version: int = 0
    chain_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_call_result(cls, agent_id: int, result: tuple) -> "AgentRecord":
        created, owner, version, metadata, chain_ids = result
        return cls(
            agent_id=format_agent_id(agent_id),
            created=bool(created),
            owner=to_checksum_address(owner),
            metadata=metadata,
            version=int(version),
            chain_ids=tuple(int(c) for c in chain_ids),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "agentId": self.agent_id,
            "created": self.created,
            "owner": self.owner,
            "metadata": self.metadata,
            "version": self.version,
            "chainIds": list(self.chain_ids),
        }
