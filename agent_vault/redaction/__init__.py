"""Redaction and restoration of secret values in text.

Placeholder grammar:
    <agent-vault:NAME>                        named reference to a vault entry
    <agent-vault:UNVAULTED:sha256:HHHHHHHH>   fingerprint of an unvaulted value
"""

from .redact import ScanReport, UnvaultedFinding, VaultedFinding, redact, scan
from .restore import (
    RestoreResult,
    UnvaultedRestoreResult,
    extract_references,
    restore,
    restore_unvaulted,
)
from .detect import fingerprint, shannon_entropy

__all__ = [
    "redact",
    "scan",
    "ScanReport",
    "VaultedFinding",
    "UnvaultedFinding",
    "restore",
    "restore_unvaulted",
    "extract_references",
    "RestoreResult",
    "UnvaultedRestoreResult",
    "fingerprint",
    "shannon_entropy",
]
