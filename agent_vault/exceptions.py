"""Vault error taxonomy.

Integrity and structural errors abort the operation. Absent secrets and
unresolved fingerprints are not exceptions: they are returned as data.
"""


class VaultError(Exception):
    """Base class for all vault errors."""


class VaultNotFound(VaultError):
    """Raised when no persisted vault exists at the resolved location."""


class InvalidName(VaultError, ValueError):
    """Raised when a secret name fails the name grammar."""


class VaultCorrupt(VaultError):
    """Raised when the persisted vault is unusable."""


class KeyMaterialMissing(VaultCorrupt):
    """Raised when the master key file is absent or unreadable."""


class MalformedVaultData(VaultCorrupt):
    """Raised when vault.json cannot be parsed or has the wrong shape."""


class TamperedData(VaultError):
    """Raised when authenticated decryption fails its integrity check."""
