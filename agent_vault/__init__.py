"""Agent Vault.

Lets an automated agent read and write config files without ever seeing
real secret values: reads are redacted against an encrypted local vault,
writes restore placeholders back to the real values.
"""
from .version import __version__
from .exceptions import (
    VaultError,
    VaultNotFound,
    InvalidName,
    VaultCorrupt,
    KeyMaterialMissing,
    MalformedVaultData,
    TamperedData,
)
from .vault import VaultConfig, VaultStore
from .redaction import extract_references, redact, restore, restore_unvaulted, scan

__all__ = [
    "__version__",
    "VaultConfig",
    "VaultStore",
    "redact",
    "restore",
    "restore_unvaulted",
    "extract_references",
    "scan",
    "VaultError",
    "VaultNotFound",
    "InvalidName",
    "VaultCorrupt",
    "KeyMaterialMissing",
    "MalformedVaultData",
    "TamperedData",
]
