"""
Heuristics for secrets that never made it into the vault.

A value pulled from a config line is secret-like when it matches a known
token grammar, or when it is high-entropy and does not look like
structured, human-readable content (lists, URLs, paths, words).
"""
import re
import math
import hashlib
from collections import Counter
from dataclasses import dataclass

from .patterns import (
    COMMENT_MARKERS,
    COMMON_BIGRAMS,
    ENGLISH_BIGRAM_RATIO,
    FINGERPRINT_LENGTH,
    HIGH_ENTROPY_THRESHOLD,
    MIN_CANDIDATE_LENGTH,
    SECRET_TOKEN_GRAMMARS,
    VALUE_EXTRACTORS,
    ValueSyntax,
)

_ARRAY_LITERAL = re.compile(r"^\[.*\]$", re.DOTALL)
_OBJECT_LITERAL = re.compile(r"^\{.*\}$", re.DOTALL)
_URL = re.compile(r"^https?://", re.IGNORECASE)
_PATH = re.compile(r"^[~.]?/")
_SEGMENT_SEPARATOR = re.compile(r"[^a-zA-Z0-9]+")
_TRAILING_QUOTE = re.compile(r"[\"'],?$")
_QUOTES = ("\"", "'")


def shannon_entropy(value: str) -> float:
    """Character-level Shannon entropy in bits per character."""
    if not value:
        return 0.0
    total = len(value)
    entropy = 0.0
    for count in Counter(value).values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def is_high_entropy(value: str) -> bool:
    if len(value) < MIN_CANDIDATE_LENGTH:
        return False
    return shannon_entropy(value) >= HIGH_ENTROPY_THRESHOLD


def matches_secret_grammar(value: str) -> bool:
    return any(grammar.matches(value) for grammar in SECRET_TOKEN_GRAMMARS)


def looks_like_english(segment: str) -> bool:
    """Check whether a letter sequence follows English bigram patterns.

    Brand names and tech terms ("kimi", "postgres") still score well;
    random letters rarely do.
    """
    s = segment.lower()
    pairs = len(s) - 1
    if pairs <= 0:
        return True
    hits = sum(1 for i in range(pairs) if s[i:i + 2] in COMMON_BIGRAMS)
    return hits / pairs >= ENGLISH_BIGRAM_RATIO


def is_word_like_segment(segment: str) -> bool:
    """A segment is word-like if short, numeric, an acronym, or English-looking.

    Mixed letters and digits are never word-like.
    """
    if len(segment) <= 3:
        return True
    if segment.isascii() and segment.isupper() and segment.isalpha():
        return True
    if segment.isascii() and segment.isdigit():
        return True
    if segment.isascii() and segment.isalpha():
        return looks_like_english(segment)
    return False


def looks_like_non_secret(value: str) -> bool:
    """Does this value look like structured, non-secret content?

    Only consulted for entropy-based detection; token grammars always win.
    """
    if _ARRAY_LITERAL.match(value) or _OBJECT_LITERAL.match(value):
        return True
    if _URL.match(value):
        return True
    if _PATH.match(value):
        return True
    segments = [seg for seg in _SEGMENT_SEPARATOR.split(value) if seg]
    if not segments:
        return False
    return all(is_word_like_segment(seg) for seg in segments)


def is_secret_like(value: str) -> bool:
    if matches_secret_grammar(value):
        return True
    if len(value) < MIN_CANDIDATE_LENGTH:
        return False
    return is_high_entropy(value) and not looks_like_non_secret(value)


def fingerprint(value: str) -> str:
    """First 8 hex characters of the SHA-256 digest of ``value``."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


@dataclass(frozen=True)
class Candidate:
    """A trimmed value found on a line; ``start``/``end`` index the line."""

    syntax: ValueSyntax
    start: int
    end: int
    value: str


def _trim(raw: str) -> tuple[int, str]:
    """Strip whitespace, one leading quote and one trailing quote/comma.

    Returns:
        (offset of the trimmed value inside ``raw``, trimmed value)
    """
    stripped = raw.lstrip()
    offset = len(raw) - len(stripped)
    value = stripped.rstrip()
    if value[:1] in _QUOTES:
        value = value[1:]
        offset += 1
    match = _TRAILING_QUOTE.search(value)
    if match:
        value = value[:match.start()]
    return offset, value


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_MARKERS)


def extract_value_candidates(line: str) -> list[Candidate]:
    """Run every value extractor over one line.

    Comment lines yield nothing. Extractors that land on the same span
    produce a single candidate.
    """
    if is_comment(line):
        return []
    candidates: list[Candidate] = []
    seen: set[tuple[int, int]] = set()
    for extractor in VALUE_EXTRACTORS:
        span = extractor.extract(line)
        if span is None:
            continue
        start, end = span
        offset, value = _trim(line[start:end])
        if not value:
            continue
        start += offset
        key = (start, start + len(value))
        if key in seen:
            continue
        seen.add(key)
        candidates.append(Candidate(extractor.syntax, key[0], key[1], value))
    return candidates


def find_secret_candidates(line: str) -> list[Candidate]:
    """Candidates on ``line`` that look like secrets."""
    return [c for c in extract_value_candidates(line) if is_secret_like(c.value)]
