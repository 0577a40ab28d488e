"""
Vault Configuration — Vault location and master key material.

The vault directory is resolved once and passed explicitly to every
store operation:
    AGENT_VAULT_DIR = <path>     (default: ~/.agent-vault)

Security Note:
    Never log key material. Only log paths.
"""
import os
import re
import secrets
import logging
from pathlib import Path

from pydantic import BaseModel, field_validator

from ..exceptions import KeyMaterialMissing

logger = logging.getLogger("agent_vault.vault")

VAULT_DIR_ENV = "AGENT_VAULT_DIR"
DEFAULT_VAULT_DIRNAME = ".agent-vault"

KEY_FILENAME = "vault.key"
DATA_FILENAME = "vault.json"

DIR_MODE = 0o700
FILE_MODE = 0o600

KEY_LENGTH = 32  # AES-256

_KEY_HEX_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def default_vault_dir() -> Path:
    """Return the vault directory used when AGENT_VAULT_DIR is unset."""
    return Path.home() / DEFAULT_VAULT_DIRNAME


def generate_master_key() -> bytes:
    """Generate a random 32-byte master key.

    Returns:
        Raw key bytes from the OS CSPRNG.
    """
    return secrets.token_bytes(KEY_LENGTH)


def load_master_key(key_path: Path) -> bytes:
    """Read the master key from its hex-encoded key file.

    Args:
        key_path: Path to vault.key.

    Returns:
        Raw 32-byte master key.

    Raises:
        KeyMaterialMissing: If the file is absent or does not hold
            exactly 64 lowercase hex characters.
    """
    if not key_path.is_file():
        raise KeyMaterialMissing(
            f"Vault key not found at {key_path}. Vault may be corrupted."
        )
    raw = key_path.read_text(encoding="utf-8").strip()
    if not _KEY_HEX_PATTERN.match(raw):
        raise KeyMaterialMissing(
            f"Vault key at {key_path} is not {KEY_LENGTH * 2} hex characters"
        )
    return bytes.fromhex(raw)


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    vault_dir: Path

    @field_validator("vault_dir")
    @classmethod
    def expand_dir(cls, v: Path) -> Path:
        """Expand ``~`` so the same vault resolves from any working directory."""
        return v.expanduser()

    @property
    def key_path(self) -> Path:
        return self.vault_dir / KEY_FILENAME

    @property
    def data_path(self) -> Path:
        return self.vault_dir / DATA_FILENAME

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig from AGENT_VAULT_DIR, falling back to ~/.agent-vault.

        Returns:
            Populated VaultConfig instance.
        """
        override = os.environ.get(VAULT_DIR_ENV)
        if override:
            logger.debug("Using vault directory from %s", VAULT_DIR_ENV)
            return cls(vault_dir=Path(override))
        return cls(vault_dir=default_vault_dir())
