"""Import secrets from a ``.env`` file into the vault."""
import re
import logging
from dataclasses import dataclass

from .store import VaultStore, is_valid_name

logger = logging.getLogger("agent_vault.vault")

DEFAULT_MIN_LENGTH = 8

# values that are configuration, not secrets
COMMON_VALUES = frozenset({
    "true", "false", "null", "undefined", "localhost", "0.0.0.0",
    "127.0.0.1", "development", "production", "staging", "test",
})

_ENV_LINE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.+)$")
_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


@dataclass(frozen=True)
class ImportCandidate:
    env_key: str
    name: str
    value: str
    skip: str | None = None

    @property
    def importable(self) -> bool:
        return self.skip is None

    def __repr__(self) -> str:
        return (
            f"ImportCandidate(env_key={self.env_key!r}, name={self.name!r}, "
            f"length={len(self.value)}, skip={self.skip!r})"
        )


def env_key_to_name(env_key: str) -> str:
    """Convert ``SCREAMING_SNAKE`` to the kebab-case vault name."""
    return env_key.lower().replace("_", "-")


def plan_env_import(
    content: str,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> list[ImportCandidate]:
    """Parse ``KEY=value`` lines into import candidates.

    Blank lines and ``#`` comments are ignored. Entries that should not be
    imported are kept in the plan with a ``skip`` reason so callers can
    show them.
    """
    candidates: list[ImportCandidate] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _ENV_LINE.match(stripped)
        if not match:
            continue
        env_key, raw_value = match.groups()
        value = _SURROUNDING_QUOTES.sub("", raw_value).strip()
        name = env_key_to_name(env_key)

        skip = None
        if not is_valid_name(name):
            skip = "invalid name"
        elif len(value) < min_length:
            skip = f"too short ({len(value)} chars)"
        elif value.lower() in COMMON_VALUES:
            skip = "common value"
        candidates.append(ImportCandidate(env_key, name, value, skip))
    return candidates


def import_env(
    store: VaultStore,
    content: str,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> list[ImportCandidate]:
    """Store every importable candidate of a ``.env`` file.

    The vault is initialised first if needed.

    Returns:
        The full plan, including skipped entries.
    """
    plan = plan_env_import(content, min_length=min_length)
    to_import = [c for c in plan if c.importable]
    if not to_import:
        return plan
    store.init()
    for candidate in to_import:
        store.set(candidate.name, candidate.value)
    logger.info(
        "Imported %d secret(s), skipped %d", len(to_import), len(plan) - len(to_import),
    )
    return plan
