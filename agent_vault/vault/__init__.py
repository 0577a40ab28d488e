"""Vault — Encrypted local store of secret name → value entries.

Security Note (Threat Model):
    The master key sits next to the data in the vault directory, protected
    only by owner-only file permissions. Anyone able to read both files can
    decrypt every secret. Decrypted values exist in process memory for the
    duration of a single operation.
"""

from .store import SecretEntry, SecretMetadata, VaultData, VaultStore, is_valid_name
from .config import VaultConfig, generate_master_key, load_master_key
from .env_import import ImportCandidate, import_env, plan_env_import

__all__ = [
    "VaultStore",
    "VaultConfig",
    "VaultData",
    "SecretEntry",
    "SecretMetadata",
    "is_valid_name",
    "generate_master_key",
    "load_master_key",
    "ImportCandidate",
    "plan_env_import",
    "import_env",
]
