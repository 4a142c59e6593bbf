"""
Signer key management.

The registry client treats a signer as an opaque capability; this module
only supplies one for the CLI: an eth-account ``LocalAccount`` built from
``PRIVATE_KEY``, read with the same precedence as the rest of the config
(process environment over ``~/.registrum/.env``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import set_key
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import REGISTRUM_ENV, load_env

logger = logging.getLogger(__name__)

PRIVATE_KEY_VAR = "PRIVATE_KEY"


def generate_eoa() -> tuple[str, str]:
    """Return ``(private_key_hex, checksummed_address)`` for a fresh account."""
    account = Account.create()
    return "0x" + bytes(account.key).hex(), account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """Set PRIVATE_KEY in the .env file; other entries are left untouched."""
    env_path = env_path or REGISTRUM_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(mode=0o600, exist_ok=True)

    set_key(env_path, PRIVATE_KEY_VAR, private_key, quote_mode="never")
    if os.name != "nt":
        env_path.chmod(0o600)

    logger.debug("Stored signer key in %s", env_path)
    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Find the signer key without exporting it into ``os.environ``.

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or REGISTRUM_ENV
    private_key = load_env(env_path).get(PRIVATE_KEY_VAR, "").strip()
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'registrum init' or set PRIVATE_KEY in {env_path}"
        )
    return private_key if private_key.startswith("0x") else "0x" + private_key


def get_signer(private_key: Optional[str] = None) -> LocalAccount:
    return Account.from_key(private_key or load_private_key())
