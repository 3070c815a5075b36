"""
Merchant/source name cleaning.

Bank statements pack a merchant code, payment-processor prefixes, reference
numbers and free text into one description. ``clean_name`` reduces that to a
display candidate:

1. truncate at the first ``*`` or double space (a leading processor prefix
   such as ``PAYPAL *`` is not treated as the separator),
2. remove every user noise filter, case-insensitively and literally,
3. strip legacy processor prefixes,
4. strip a leading ``<digits><sep>`` and a trailing ``<sep><digits>``,
5. blank out standalone runs of four or more digits,
6. strip a trailing domain suffix (.com, .dk, .net, .org, .co.uk),
7. collapse whitespace and trim.

The steps are repeated until the text stops changing, so cleaning an already
clean name is a no-op.
"""
import re
from functools import lru_cache
from typing import Any

from budget_categorizer.domain.filters import normalize_filters
from budget_categorizer.logger import get_logger

logger = get_logger(__name__)

LEGACY_PREFIXES = ("PAYPAL", "SUMUP", "IZ", "GOOGLE")

_LEGACY_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(LEGACY_PREFIXES) + r") ?\*\s*",
    re.IGNORECASE,
)
_SEPARATORS = r"[\s#:/.]"
_LEADING_REFERENCE_RE = re.compile(rf"^\d+{_SEPARATORS}+")
_TRAILING_REFERENCE_RE = re.compile(rf"{_SEPARATORS}+\d+$")
_STANDALONE_DIGITS_RE = re.compile(r"(?<!\S)\d{4,}(?!\S)")
_DOMAIN_SUFFIX_RE = re.compile(r"\.(?:co\.uk|com|dk|net|org)$", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


@lru_cache(maxsize=512)
def _compile_filter(noise_filter: str) -> re.Pattern[str] | None:
    if not noise_filter.strip():
        logger.warning("[CLEAN] Skipping blank noise filter %r.", noise_filter)
        return None
    try:
        return re.compile(re.escape(noise_filter), re.IGNORECASE)
    except re.error as exc:
        logger.warning("[CLEAN] Skipping unusable noise filter %r: %s", noise_filter, exc)
        return None


def compile_noise_filters(noise_filters: Any) -> list[re.Pattern[str]]:
    patterns: list[re.Pattern[str]] = []
    for noise_filter in normalize_filters(noise_filters):
        if not isinstance(noise_filter, str):
            logger.warning("[CLEAN] Skipping non-text noise filter %r.", noise_filter)
            continue
        pattern = _compile_filter(noise_filter)
        if pattern is not None:
            patterns.append(pattern)
    return patterns


def _truncate(text: str) -> str:
    start = 0
    prefix = _LEGACY_PREFIX_RE.match(text)
    if prefix:
        start = prefix.end()

    cut = len(text)
    for marker in ("*", "  "):
        index = text.find(marker, start)
        if index != -1:
            cut = min(cut, index)
    return text[:cut]


def _clean_once(text: str, patterns: list[re.Pattern[str]]) -> str:
    text = _truncate(text.strip())
    for pattern in patterns:
        text = pattern.sub("", text)
    text = _LEGACY_PREFIX_RE.sub("", text.lstrip(), count=1)
    text = _LEADING_REFERENCE_RE.sub("", text)
    text = _TRAILING_REFERENCE_RE.sub("", text.rstrip())
    text = _STANDALONE_DIGITS_RE.sub(" ", text)
    text = _DOMAIN_SUFFIX_RE.sub("", text.rstrip())
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_name(raw: Any, noise_filters: Any = None) -> str:
    """
    Reduce a raw bank description to a canonical display name.

    Returns an empty string when the input is nothing but noise.
    """
    if raw is None:
        return ""
    return clean_with_patterns(str(raw), compile_noise_filters(noise_filters))


def clean_with_patterns(raw: str, patterns: list[re.Pattern[str]]) -> str:
    current = raw
    # Every pass that changes the text shortens it, after at most one
    # whitespace-only normalisation.
    for _ in range(len(current) + 2):
        cleaned = _clean_once(current, patterns)
        if cleaned == current:
            break
        current = cleaned
    return current


def _noise_token(noise_filter: str) -> str:
    return noise_filter.upper().replace("*", "").strip()


def suggest_pattern(source: str, noise_filters: Any = None) -> str:
    """Pick the first meaningful word of ``source`` as a default rule pattern."""
    words = [word for word in (source or "").split(" ") if word]
    tokens = [
        _noise_token(f) for f in normalize_filters(noise_filters)
        if isinstance(f, str) and _noise_token(f)
    ]

    for word in words:
        upper = word.upper()
        is_noise = any(
            token == upper or upper.startswith(token + "-") or upper.endswith("-" + token)
            for token in tokens
        )
        if not is_noise and len(word) > 1:
            return word
    return words[0] if words else (source or "")


def is_noise_pattern(pattern: str, noise_filters: Any = None) -> bool:
    upper = (pattern or "").upper()
    for noise_filter in normalize_filters(noise_filters):
        if not isinstance(noise_filter, str):
            continue
        token = _noise_token(noise_filter)
        if token and (upper == token or upper.startswith(token + " ")):
            return True
    return False
