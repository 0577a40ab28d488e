"""
Redaction Engine — hide secret values before content reaches an agent.

Phase 1 replaces every occurrence of a known vault value with its named
reference. Phase 2 looks at the value of each config-style line and
replaces anything secret-like with a fingerprint reference.
"""
import re
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .detect import find_secret_candidates, fingerprint
from .patterns import (
    ANY_REFERENCE,
    FINGERPRINT_REFERENCE,
    MIN_REDACT_LENGTH,
    PLACEHOLDER_PREFIX,
    fingerprint_reference,
    named_reference,
)

logger = logging.getLogger("agent_vault.redaction")


def _known_value_pattern(known_values: Mapping[str, str]) -> re.Pattern | None:
    """Compile one literal alternation over the redactable known values.

    Existing references come first and are matched whole, so a value that
    occurs inside a reference is never rewritten. Values are ordered
    longest first, so a value that is a substring of another never leaves
    a partial replacement behind.
    """
    values = sorted(
        (value for value in known_values if len(value) >= MIN_REDACT_LENGTH),
        key=len,
        reverse=True,
    )
    if not values:
        return None
    alternation = "|".join(re.escape(value) for value in values)
    return re.compile(f"(?P<ref>{ANY_REFERENCE.pattern})|{alternation}")


def _replace_known_values(
    content: str,
    pattern: re.Pattern | None,
    known_values: Mapping[str, str],
) -> str:
    # single pass: inserted references are never matched again
    if pattern is None:
        return content

    def substitute(match: re.Match) -> str:
        if match.group("ref"):
            return match.group(0)
        return named_reference(known_values[match.group(0)])

    return pattern.sub(substitute, content)


def _redact(
    content: str,
    pattern: re.Pattern | None,
    known_values: Mapping[str, str],
) -> tuple[str, int]:
    result = _replace_known_values(content, pattern, known_values)
    known = frozenset(known_values)
    lines = []
    unvaulted = 0
    for line in result.split("\n"):
        redacted, count = redact_line(line, known)
        lines.append(redacted)
        unvaulted += count
    return "\n".join(lines), unvaulted


def _splice(line: str, replacements: list[tuple[int, int, str]]) -> str:
    """Apply non-overlapping (start, end, text) replacements to a line."""
    out = []
    cursor = 0
    for start, end, text in sorted(replacements):
        if start < cursor:
            continue
        out.append(line[cursor:start])
        out.append(text)
        cursor = end
    out.append(line[cursor:])
    return "".join(out)


def redact_line(line: str, known: frozenset[str] = frozenset()) -> tuple[str, int]:
    """Replace secret-like values on one line with fingerprint references.

    Lines that already carry a placeholder are left alone, which keeps
    redaction idempotent.

    Returns:
        (redacted line, number of fingerprint references inserted)
    """
    if PLACEHOLDER_PREFIX in line:
        return line, 0
    replacements = [
        (c.start, c.end, fingerprint_reference(fingerprint(c.value)))
        for c in find_secret_candidates(line)
        if c.value not in known
    ]
    if not replacements:
        return line, 0
    return _splice(line, replacements), len(replacements)


def redact(content: str, known_values: Mapping[str, str]) -> str:
    """Redact known vault secrets and unvaulted secret-like values.

    Args:
        content: Raw file content.
        known_values: Map of plaintext value → vault name.

    Returns:
        Redacted content.
    """
    result, unvaulted = _redact(content, _known_value_pattern(known_values), known_values)
    if unvaulted:
        logger.debug("Redacted %d unvaulted value(s)", unvaulted)
    return result


@dataclass(frozen=True)
class VaultedFinding:
    line: int
    name: str


@dataclass(frozen=True)
class UnvaultedFinding:
    line: int
    fingerprint: str


@dataclass
class ScanReport:
    """Where secrets sit in a file. Line numbers are 1-based."""

    vaulted: list[VaultedFinding] = field(default_factory=list)
    unvaulted: list[UnvaultedFinding] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.vaulted and not self.unvaulted


def scan(content: str, known_values: Mapping[str, str]) -> ScanReport:
    """Audit content for vaulted values and unvaulted suspects.

    Each line is checked on its own, so line numbers always refer to the
    original content.
    """
    report = ScanReport()
    pattern = _known_value_pattern(known_values)
    candidates = [
        (value, name) for value, name in known_values.items()
        if len(value) >= MIN_REDACT_LENGTH
    ]
    for number, line in enumerate(content.split("\n"), start=1):
        for value, name in candidates:
            if value in line:
                report.vaulted.append(VaultedFinding(number, name))
        redacted, _ = _redact(line, pattern, known_values)
        for match in FINGERPRINT_REFERENCE.finditer(redacted):
            report.unvaulted.append(UnvaultedFinding(number, match.group(1)))
    return report
