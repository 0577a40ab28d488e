"""
Vault Crypto Core — Per-value authenticated encryption and packing.

Each secret value is encrypted independently:
    AES-256-GCM(master_key, random 96-bit nonce) → ciphertext + 128-bit tag

Stored format (all lowercase hex):
    "<nonce 24 chars>:<tag 32 chars>:<ciphertext>"

Security Note:
    Never log plaintext or ciphertext values.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import re
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..exceptions import MalformedVaultData, TamperedData

logger = logging.getLogger("agent_vault.vault")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # 128-bit GCM tag

_HEX = re.compile(r"^(?:[0-9a-f]{2})*$")


def pack(nonce: bytes, tag: bytes, ciphertext: bytes) -> str:
    """Join the three segments into the stored ``nonce:tag:ciphertext`` form."""
    return f"{nonce.hex()}:{tag.hex()}:{ciphertext.hex()}"


def unpack(packed: str) -> tuple[bytes, bytes, bytes]:
    """Split a stored value into (nonce, tag, ciphertext).

    Raises:
        MalformedVaultData: If the value is not three hex segments with a
            12-byte nonce and a 16-byte tag.
    """
    parts = packed.split(":")
    if len(parts) != 3 or not all(_HEX.match(p) for p in parts):
        raise MalformedVaultData(
            "Encrypted value must be three hex segments 'nonce:tag:ciphertext'"
        )
    nonce, tag, ciphertext = (bytes.fromhex(p) for p in parts)
    if len(nonce) != NONCE_SIZE or len(tag) != TAG_SIZE:
        raise MalformedVaultData(
            f"Encrypted value has nonce of {len(nonce)} bytes and tag of "
            f"{len(tag)} bytes (expected {NONCE_SIZE} and {TAG_SIZE})"
        )
    return nonce, tag, ciphertext


def encrypt_value(plaintext: str, master_key: bytes) -> str:
    """Encrypt a secret value under the master key with a fresh nonce.

    Args:
        plaintext: Secret value to encrypt.
        master_key: Raw 32-byte master key.

    Returns:
        Packed ``nonce:tag:ciphertext`` string.
    """
    cipher = AESGCM(master_key)
    nonce = os.urandom(NONCE_SIZE)
    sealed = cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
    # cryptography appends the tag to the ciphertext
    return pack(nonce, sealed[-TAG_SIZE:], sealed[:-TAG_SIZE])


def decrypt_value(packed: str, master_key: bytes) -> str:
    """Decrypt a packed secret value.

    Args:
        packed: Value in ``nonce:tag:ciphertext`` form.
        master_key: Raw 32-byte master key.

    Returns:
        Decrypted plaintext.

    Raises:
        MalformedVaultData: If the packed value is structurally invalid.
        TamperedData: If the authentication tag does not verify.
    """
    nonce, tag, ciphertext = unpack(packed)
    cipher = AESGCM(master_key)
    try:
        plaintext = cipher.decrypt(nonce, ciphertext + tag, None)
    except InvalidTag as err:
        raise TamperedData(
            "Encrypted value failed its integrity check"
        ) from err
    return plaintext.decode("utf-8")
