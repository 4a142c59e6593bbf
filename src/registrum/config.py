"""
Runtime configuration, read from the environment.

``~/.registrum/.env`` is loaded first without overriding variables already
set in the process, so an exported variable always wins over the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

REGISTRUM_DIR = Path.home() / ".registrum"
REGISTRUM_ENV = REGISTRUM_DIR / ".env"

DEFAULT_RPC_URL = "https://polygon-rpc.com/"
# Forta AgentRegistry proxy on Polygon
DEFAULT_REGISTRY_ADDRESS = "0x61447385B019187daa48e91c55c02AF1F1f3F863"
DEFAULT_POLL_INTERVAL = 2.0


class ConfigError(ValueError):
    pass


def _optional_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _optional_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def resolve_rpc_url(env: Mapping[str, str]) -> str:
    # host/port injected by a scanner runtime take precedence
    host = env.get("JSON_RPC_HOST")
    if host:
        port = env.get("JSON_RPC_PORT")
        return f"http://{host}:{port}" if port else f"http://{host}"

    url = env.get("REGISTRY_RPC_URL") or DEFAULT_RPC_URL
    if not url.startswith("http"):
        raise ConfigError("REGISTRY_RPC_URL must begin with http(s)")
    return url


def load_env(env_path: Optional[Path] = None) -> dict[str, str]:
    """Merge the ``.env`` file under the process environment."""
    env_path = env_path or REGISTRUM_ENV
    merged: dict[str, str] = {}
    if env_path.exists():
        merged.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    merged.update(os.environ)
    return merged


@dataclass(frozen=True)
class RegistryConfig:
    rpc_url: str = DEFAULT_RPC_URL
    registry_address: str = DEFAULT_REGISTRY_ADDRESS
    chain_id: Optional[int] = None
    confirmation_timeout: Optional[float] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        env_path: Optional[Path] = None,
    ) -> "RegistryConfig":
        if env is None:
            env = load_env(env_path)

        config = cls(
            rpc_url=resolve_rpc_url(env),
            registry_address=env.get("AGENT_REGISTRY_ADDRESS") or DEFAULT_REGISTRY_ADDRESS,
            chain_id=_optional_int(env, "CHAIN_ID"),
            confirmation_timeout=_optional_float(env, "REGISTRY_CONFIRMATION_TIMEOUT"),
            poll_interval=_optional_float(env, "REGISTRY_POLL_INTERVAL") or DEFAULT_POLL_INTERVAL,
        )
        logger.debug("Loaded config: %s", config)
        return config
