"""
Static tables for redaction and restoration.

Everything the detector tunes on lives here so it can be inspected and
tested without running the detection algorithm:
- placeholder grammar (named and fingerprinted references)
- secret-token grammars for common provider formats
- the most frequent English bigrams
- value extractors for env, YAML and JSON lines
"""
import re
from enum import Enum
from dataclasses import dataclass

PLACEHOLDER_PREFIX = "<agent-vault:"

NAME_GRAMMAR = r"[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"

# uppercase and underscores never match, so UNVAULTED tokens stay out
NAMED_REFERENCE = re.compile(rf"<agent-vault:({NAME_GRAMMAR})>")
FINGERPRINT_REFERENCE = re.compile(r"<agent-vault:UNVAULTED:sha256:([a-f0-9]{8})>")
ANY_REFERENCE = re.compile(rf"<agent-vault:(?:UNVAULTED:sha256:[a-f0-9]{{8}}|{NAME_GRAMMAR})>")

FINGERPRINT_LENGTH = 8


def named_reference(name: str) -> str:
    return f"<agent-vault:{name}>"


def fingerprint_reference(fingerprint: str) -> str:
    return f"<agent-vault:UNVAULTED:sha256:{fingerprint}>"


@dataclass(frozen=True)
class TokenGrammar:
    """A known secret format, matched anywhere inside a candidate value."""

    name: str
    pattern: re.Pattern

    def matches(self, value: str) -> bool:
        return self.pattern.search(value) is not None


SECRET_TOKEN_GRAMMARS: tuple[TokenGrammar, ...] = (
    TokenGrammar("openai", re.compile(r"sk-[A-Za-z0-9_-]{20,}")),
    TokenGrammar("openai-project", re.compile(r"sk-proj-[A-Za-z0-9_-]{20,}")),
    TokenGrammar("anthropic", re.compile(r"sk-ant-[A-Za-z0-9_-]{20,}")),
    TokenGrammar("github", re.compile(r"gh[po]_[A-Za-z0-9_]{36,}")),
    TokenGrammar("github-pat", re.compile(r"github_pat_[A-Za-z0-9_]{22,}")),
    TokenGrammar("slack", re.compile(r"xox[bpas]-[A-Za-z0-9-]{10,}")),
    TokenGrammar("stripe-secret-live", re.compile(r"sk_live_[A-Za-z0-9]{24,}")),
    TokenGrammar("stripe-secret-test", re.compile(r"sk_test_[A-Za-z0-9]{24,}")),
    TokenGrammar("stripe-public-live", re.compile(r"pk_live_[A-Za-z0-9]{24,}")),
    TokenGrammar("stripe-public-test", re.compile(r"pk_test_[A-Za-z0-9]{24,}")),
    TokenGrammar("aws-access-key", re.compile(r"AKIA[0-9A-Z]{16}")),
    TokenGrammar("telegram-bot", re.compile(r"[0-9]{8,10}:[A-Za-z0-9_-]{35}")),
    TokenGrammar("hex", re.compile(r"[0-9a-f]{40,}")),
    TokenGrammar("base64", re.compile(r"[A-Za-z0-9+/]{32,}={0,2}")),
    TokenGrammar(
        "private-key",
        re.compile(r"-----BEGIN [A-Z ]+-----.*?-----END [A-Z ]+-----", re.DOTALL),
    ),
    TokenGrammar("jwt", re.compile(r"eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")),
    TokenGrammar("bearer", re.compile(r"Bearer\s+[A-Za-z0-9_.-]{20,}")),
)

# Top English bigrams by frequency. Real words hit these often; random
# strings score around 17%.
COMMON_BIGRAMS = frozenset({
    "th", "he", "in", "er", "an", "re", "on", "en", "at", "es",
    "ed", "te", "ti", "or", "st", "ar", "nd", "to", "nt", "is",
    "of", "it", "al", "as", "ha", "ng", "co", "se", "me", "de",
    "le", "ou", "no", "ne", "ea", "ri", "ro", "li", "ra", "io",
    "ic", "el", "la", "ve", "ta", "ce", "ma", "si", "om", "ur",
    "ec", "il", "ge", "lo", "ch", "so", "pr", "pe", "fo", "ca",
    "di", "be", "mo", "ag", "un", "us", "wi", "hi", "sh", "ac",
    "ad", "ol", "ab", "mi", "im", "id", "oo", "ke", "ki", "su",
    "po", "pa", "wa", "up", "do", "fi", "ho", "da", "fe", "vi",
    "ow", "am", "ut", "ni", "lu", "tr", "pl", "bl", "sp", "cr",
    "na", "ot", "ns", "ll", "ss", "wh", "ck", "gh", "ry", "ly",
    "ty", "ay", "ey",
})

ENGLISH_BIGRAM_RATIO = 0.3

# Phase 2 thresholds. Typical entropy: English text ~4.0, random hex ~3.7,
# random base64 ~5.5 bits per character.
MIN_CANDIDATE_LENGTH = 12
HIGH_ENTROPY_THRESHOLD = 3.0

# Phase 1 ignores shorter vault values ("true", "3000", ...)
MIN_REDACT_LENGTH = 8

COMMENT_MARKERS = ("#", "//")


class ValueSyntax(Enum):
    ENV = "env"
    YAML = "yaml"
    JSON = "json"


@dataclass(frozen=True)
class ValueExtractor:
    """Pulls the value span out of one config-line syntax.

    ``anchored`` extractors match the whole line; the others search for
    the first occurrence anywhere in it.
    """

    syntax: ValueSyntax
    pattern: re.Pattern
    anchored: bool = True

    def extract(self, line: str) -> tuple[int, int] | None:
        match = self.pattern.match(line) if self.anchored else self.pattern.search(line)
        if match is None:
            return None
        return match.span(1)


VALUE_EXTRACTORS: tuple[ValueExtractor, ...] = (
    ValueExtractor(
        ValueSyntax.ENV,
        re.compile(r"^\s*[A-Za-z_][A-Za-z0-9_]*\s*=\s*(.+)$"),
    ),
    ValueExtractor(
        ValueSyntax.YAML,
        re.compile(r"^\s*[A-Za-z_][A-Za-z0-9_.-]*\s*:\s+(.+)$"),
    ),
    ValueExtractor(
        ValueSyntax.JSON,
        re.compile(r"\"[^\"]+\"\s*:\s*\"([^\"]+)\""),
        anchored=False,
    ),
)
