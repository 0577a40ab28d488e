"""
VaultStore — Encrypted key-value storage in a local vault directory.

Provides the public API for the vault:
- ``init()`` — create the master key and an empty vault (idempotent)
- ``set(name, value, description)`` — encrypt and persist a secret
- ``get(name)`` / ``get_metadata(name)`` — decrypt a secret or describe it
- ``has(name)`` / ``list_secrets()`` — check and enumerate names
- ``remove(name)`` — delete a secret
- ``all_values()`` — plaintext → name map consumed by redaction

Every mutation rewrites the whole of vault.json through an atomic rename.
There is no locking: concurrent writers race, last writer wins.

Security Note:
    Never log plaintext or ciphertext values. Only log names and counts.
    The master key is read from disk per operation and not kept on the
    instance.
"""
import os
import re
import logging
import tempfile
from pathlib import Path
from datetime import datetime, timezone

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidName, MalformedVaultData, VaultNotFound
from .config import DIR_MODE, FILE_MODE, VaultConfig, generate_master_key, load_master_key
from .crypto import decrypt_value, encrypt_value

logger = logging.getLogger("agent_vault.vault")

NAME_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")
_MAX_NAME_LENGTH = 255


def is_valid_name(name: str) -> bool:
    """Return True if ``name`` is lowercase alphanumeric with internal hyphens."""
    return len(name) <= _MAX_NAME_LENGTH and NAME_PATTERN.match(name) is not None


def validate_name(name: str) -> None:
    """Validate a secret name.

    Raises:
        InvalidName: If name is empty, too long, or outside the name grammar.
    """
    if not is_valid_name(name):
        raise InvalidName(
            f"Invalid secret name {name!r}: use lowercase letters, digits "
            "and internal hyphens (e.g. 'openai-key')"
        )


def _utcnow_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SecretEntry(BaseModel):
    """One persisted secret. ``value`` is the packed ciphertext."""

    model_config = ConfigDict(populate_by_name=True)

    value: str
    description: str | None = Field(default=None, alias="desc")
    created_at: str = Field(alias="createdAt")


class VaultData(BaseModel):
    """Root of vault.json."""

    model_config = ConfigDict(extra="forbid")

    secrets: dict[str, SecretEntry]


class SecretMetadata(BaseModel):
    """Displayable facts about a secret; never carries the value."""

    name: str
    description: str | None = None
    created_at: str
    length: int


class VaultStore:
    """Encrypted vault persisted as vault.key + vault.json in one directory.

    The store is a thin, stateless handle: every call reads what it needs
    from disk, so several stores over distinct directories can coexist.
    """

    def __init__(self, config: VaultConfig):
        self._config = config

    @property
    def vault_dir(self) -> Path:
        return self._config.vault_dir

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def _write_private(self, path: Path, payload: bytes) -> None:
        """Atomically replace ``path`` with ``payload``, owner-only."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _require(self) -> None:
        if not self.exists():
            raise VaultNotFound(
                f"No vault found at {self.vault_dir}. Run: agent-vault init"
            )

    def _load(self) -> VaultData:
        """Read and validate vault.json."""
        self._require()
        raw = self._config.data_path.read_bytes()
        try:
            return VaultData.model_validate(orjson.loads(raw))
        except orjson.JSONDecodeError as err:
            raise MalformedVaultData(
                f"{self._config.data_path} is not valid JSON: {err}"
            ) from err
        except ValidationError as err:
            raise MalformedVaultData(
                f"{self._config.data_path} has an unexpected structure: {err}"
            ) from err

    def _save(self, data: VaultData) -> None:
        payload = orjson.dumps(
            data.model_dump(by_alias=True, exclude_none=True),
            option=orjson.OPT_INDENT_2,
        )
        self._write_private(self._config.data_path, payload)

    def _master_key(self) -> bytes:
        return load_master_key(self._config.key_path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        """Return True if a vault has been initialised at this location."""
        return self._config.data_path.is_file()

    def init(self) -> Path:
        """Create the vault directory, master key and empty vault.

        Idempotent: an existing vault.json is left untouched, and an
        existing key file is never regenerated.

        Returns:
            The vault directory.
        """
        if self.exists():
            return self.vault_dir

        if not self.vault_dir.exists():
            self.vault_dir.mkdir(mode=DIR_MODE, parents=True)
            # mkdir honours the umask
            os.chmod(self.vault_dir, DIR_MODE)

        key_path = self._config.key_path
        if not key_path.exists():
            key = generate_master_key()
            self._write_private(key_path, key.hex().encode("ascii"))

        self._save(VaultData(secrets={}))
        logger.info("Initialized vault at %s", self.vault_dir)
        return self.vault_dir

    def set(self, name: str, value: str, description: str | None = None) -> None:
        """Encrypt and persist a secret, overwriting any existing entry.

        Args:
            name: Secret name (lowercase alphanumeric, internal hyphens).
            value: Secret value to encrypt and store.
            description: Optional human-readable description.

        Raises:
            InvalidName: If name fails the name grammar.
            VaultNotFound: If the vault has not been initialised.
        """
        validate_name(name)
        data = self._load()
        master_key = self._master_key()
        data.secrets[name] = SecretEntry(
            value=encrypt_value(value, master_key),
            description=description,
            created_at=_utcnow_iso(),
        )
        self._save(data)
        logger.debug("Vault set: name=%s", name)

    def get(self, name: str) -> str | None:
        """Decrypt and return a secret, or None if it does not exist.

        Raises:
            TamperedData: If the stored ciphertext fails authentication.
        """
        data = self._load()
        master_key = self._master_key()
        entry = data.secrets.get(name)
        if entry is None:
            return None
        return decrypt_value(entry.value, master_key)

    def get_metadata(self, name: str) -> SecretMetadata | None:
        """Return description, creation time and value length for a secret."""
        data = self._load()
        master_key = self._master_key()
        entry = data.secrets.get(name)
        if entry is None:
            return None
        plaintext = decrypt_value(entry.value, master_key)
        return SecretMetadata(
            name=name,
            description=entry.description,
            created_at=entry.created_at,
            length=len(plaintext),
        )

    def has(self, name: str) -> bool:
        """Check whether a secret exists, without decrypting anything."""
        return name in self._load().secrets

    def list_secrets(self) -> list[tuple[str, str | None]]:
        """List ``(name, description)`` pairs. Values are never included."""
        data = self._load()
        return [
            (name, entry.description) for name, entry in data.secrets.items()
        ]

    def remove(self, name: str) -> bool:
        """Delete a secret.

        Returns:
            True if the secret existed, False otherwise.
        """
        data = self._load()
        if name not in data.secrets:
            return False
        del data.secrets[name]
        self._save(data)
        logger.debug("Vault remove: name=%s", name)
        return True

    def all_values(self) -> dict[str, str]:
        """Decrypt every entry into a plaintext value → name map.

        Used by the redaction engine only. When two names share a value,
        the later entry wins.
        """
        data = self._load()
        master_key = self._master_key()
        values: dict[str, str] = {}
        for name, entry in data.secrets.items():
            values[decrypt_value(entry.value, master_key)] = name
        logger.debug("Vault decrypted %d value(s) for redaction", len(values))
        return values
