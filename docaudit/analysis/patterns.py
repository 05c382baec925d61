"""Pattern-based token extraction for the local fallback pass.

Amounts, dates and organisation names are pulled out of plain text with
regular expressions. Every token keeps its character offset so findings can
carry an approximate page/line locator.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime

CHARS_PER_PAGE = 3000

_MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "m": 1_000_000,
    "million": 1_000_000,
    "b": 1_000_000_000,
    "billion": 1_000_000_000,
}

_CURRENCY_RE = re.compile(
    r"\$\s?(?P<number>\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
    r"(?:\s?(?P<scale>thousand|million|billion|[kKmMbB])\b)?"
)
_WRITTEN_CURRENCY_RE = re.compile(
    r"\b(?P<number>\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)\s*(?:dollars?|USD)\b",
    re.IGNORECASE,
)
_PERCENT_RE = re.compile(r"\b(?P<number>\d+(?:\.\d+)?)\s?%")

_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
    "|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec"
)
_DATE_PATTERNS: list[tuple[re.Pattern[str], tuple[str, ...]]] = [
    (re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"), ("%m/%d/%Y",)),
    (re.compile(r"\b\d{4}/\d{1,2}/\d{1,2}\b"), ("%Y/%m/%d",)),
    (re.compile(r"\b\d{1,2}-\d{1,2}-\d{4}\b"), ("%m-%d-%Y",)),
    (re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b"), ("%Y-%m-%d",)),
    (
        re.compile(rf"\b(?:{_MONTHS})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b"),
        ("%B %d %Y", "%b %d %Y"),
    ),
    (
        re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+(?:{_MONTHS})\.?,?\s+\d{{4}}\b"),
        ("%d %B %Y", "%d %b %Y"),
    ),
]

_ORG_SUFFIXES = (
    "Inc|LLC|Corp|Corporation|Ltd|Limited|Co|Company|Group|Holdings|Partners|GmbH|PLC"
)
_ENTITY_RE = re.compile(
    rf"\b(?:[A-Z][A-Za-z0-9&'\-]*\s+){{1,4}}(?:{_ORG_SUFFIXES})\b\.?"
)
_SUFFIX_WORDS = frozenset(s.lower() for s in _ORG_SUFFIXES.split("|"))
_STOP_WORDS = frozenset({"the", "and", "of", "for", "by", "with", "vendor", "supplier"})

COMPLIANCE_KEYWORD_RE = re.compile(
    r"\b(?:SOC\s?[123]?|ISO(?:\s?\d{4,5})?|GDPR|HIPAA|audit\w*|attest\w*|certif\w*|complian\w*)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class AmountToken:
    text: str
    value: float
    offset: int
    is_percentage: bool = False


@dataclass(frozen=True)
class DateToken:
    text: str
    offset: int
    value: date | None = None


@dataclass(frozen=True)
class EntityToken:
    text: str
    offset: int
    stems: frozenset[str]


def locate(text: str, offset: int) -> tuple[int, int]:
    """Approximate (page, line) for a character offset."""
    line = text.count("\n", 0, offset) + 1
    page = offset // CHARS_PER_PAGE + 1
    return page, line


def _to_number(raw: str) -> float:
    return float(raw.replace(",", ""))


def extract_amounts(text: str) -> list[AmountToken]:
    """Distinct currency and percentage tokens in order of first appearance."""
    found: list[AmountToken] = []
    for match in _CURRENCY_RE.finditer(text):
        value = _to_number(match.group("number"))
        scale = match.group("scale")
        if scale:
            value *= _MULTIPLIERS[scale.lower()]
        found.append(AmountToken(match.group(0).strip(), value, match.start()))
    for match in _WRITTEN_CURRENCY_RE.finditer(text):
        found.append(
            AmountToken(match.group(0).strip(), _to_number(match.group("number")), match.start())
        )
    for match in _PERCENT_RE.finditer(text):
        found.append(
            AmountToken(
                match.group(0).strip(),
                _to_number(match.group("number")),
                match.start(),
                is_percentage=True,
            )
        )

    distinct: dict[tuple[float, bool], AmountToken] = {}
    for token in sorted(found, key=lambda t: t.offset):
        distinct.setdefault((token.value, token.is_percentage), token)
    return list(distinct.values())


def _parse_date(raw: str, formats: tuple[str, ...]) -> date | None:
    cleaned = re.sub(r"(?<=\d)(?:st|nd|rd|th)\b", "", raw)
    cleaned = cleaned.replace(",", " ").replace(".", " ")
    cleaned = " ".join(cleaned.split())
    for fmt in formats:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def extract_dates(text: str) -> list[DateToken]:
    """Distinct date tokens; two spellings of the same day count once."""
    found: list[DateToken] = []
    for pattern, formats in _DATE_PATTERNS:
        for match in pattern.finditer(text):
            raw = match.group(0).strip()
            found.append(DateToken(raw, match.start(), _parse_date(raw, formats)))

    distinct: dict[object, DateToken] = {}
    for token in sorted(found, key=lambda t: t.offset):
        key: object = token.value if token.value is not None else token.text
        distinct.setdefault(key, token)
    return list(distinct.values())


def _stems(name: str) -> frozenset[str]:
    words = re.findall(r"[A-Za-z0-9]+", name)
    stems = set()
    for word in words:
        lowered = word.lower()
        if lowered in _SUFFIX_WORDS or lowered in _STOP_WORDS:
            continue
        stem = lowered[:-1] if lowered.endswith("s") and len(lowered) > 3 else lowered
        if len(stem) >= 3:
            stems.add(stem)
    return frozenset(stems)


def extract_entities(text: str) -> list[EntityToken]:
    """Distinct organisation-like names (capitalised words ending in a legal suffix)."""
    distinct: dict[str, EntityToken] = {}
    for match in _ENTITY_RE.finditer(text):
        name = " ".join(match.group(0).split()).rstrip(".")
        distinct.setdefault(name, EntityToken(name, match.start(), _stems(name)))
    return list(distinct.values())


def format_amount(value: float) -> str:
    if value == int(value):
        return f"${int(value):,}"
    return f"${value:,.2f}"
