"""
Restoration Engine — turn placeholders back into real values on write.

Named references resolve through a lookup (normally ``VaultStore.get``).
Fingerprint references resolve against the file's current content on
disk, by re-running unvaulted detection over it.

Unresolvable references are left in place and reported, never raised:
callers decide whether they block a write.
"""
import re
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .detect import find_secret_candidates, fingerprint
from .patterns import FINGERPRINT_REFERENCE, NAMED_REFERENCE

logger = logging.getLogger("agent_vault.redaction")

Lookup = Callable[[str], str | None]


@dataclass
class RestoreResult:
    content: str
    restored_names: list[str] = field(default_factory=list)
    missing_names: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing_names


@dataclass
class UnvaultedRestoreResult:
    content: str
    restored_count: int = 0
    unmatched_fingerprints: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.unmatched_fingerprints


def restore(content: str, lookup: Lookup) -> RestoreResult:
    """Replace ``<agent-vault:NAME>`` references with real values.

    ``lookup`` is called once per distinct name. Names are reported once
    each, in order of first appearance.

    Args:
        content: Content with named references.
        lookup: Returns the value for a name, or None if absent.
    """
    resolved: dict[str, str | None] = {}
    result = RestoreResult(content=content)

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in resolved:
            value = lookup(name)
            resolved[name] = value
            if value is None:
                result.missing_names.append(name)
            else:
                result.restored_names.append(name)
        value = resolved[name]
        return match.group(0) if value is None else value

    result.content = NAMED_REFERENCE.sub(_substitute, content)
    if result.missing_names:
        logger.debug("Missing secrets: %s", ", ".join(result.missing_names))
    return result


def build_fingerprint_table(existing_content: str) -> dict[str, str]:
    """Map fingerprint → plaintext for every secret-like value in a file."""
    table: dict[str, str] = {}
    for line in existing_content.split("\n"):
        for candidate in find_secret_candidates(line):
            table[fingerprint(candidate.value)] = candidate.value
    return table


def restore_unvaulted(content: str, existing_content: str) -> UnvaultedRestoreResult:
    """Replace fingerprint references with values recovered from disk.

    Args:
        content: Content with ``<agent-vault:UNVAULTED:sha256:H>`` references.
        existing_content: The current file content on disk.
    """
    table = build_fingerprint_table(existing_content)
    result = UnvaultedRestoreResult(content=content)

    def _substitute(match: re.Match) -> str:
        digest = match.group(1)
        value = table.get(digest)
        if value is None:
            if digest not in result.unmatched_fingerprints:
                result.unmatched_fingerprints.append(digest)
            return match.group(0)
        result.restored_count += 1
        return value

    result.content = FINGERPRINT_REFERENCE.sub(_substitute, content)
    return result


def extract_references(content: str) -> list[str]:
    """Distinct named references in ``content``, in order of appearance.

    Fingerprint references are not included.
    """
    return list(dict.fromkeys(NAMED_REFERENCE.findall(content)))
