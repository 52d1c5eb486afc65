# =============================================================================
# Field Names Module
# =============================================================================
# Deterministic output-name sanitization for export targets with restricted
# column identifiers (e.g. the 10-character DBF limit of shapefiles).
# Uses "smart compression" to preserve meaning before hard truncation.
# =============================================================================

import logging
import re
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Set, Tuple

from nltk.corpus import stopwords as _nltk_stopwords_module

__all__ = [
    "DEFAULT_ABBREVIATIONS",
    "DBF_FIELD_NAME_LIMIT",
    "normalize_field_names",
    "deduplicate_words",
    "remove_inner_vowels",
]

log = logging.getLogger(__name__)

DBF_FIELD_NAME_LIMIT = 10

# -----------------------------------------------------------------------------
# NLTK stopwords loading
# -----------------------------------------------------------------------------
_nltk_stopwords: Optional[Set[str]] = None


def _get_nltk_stopwords() -> Set[str]:
    """
    Load NLTK English stopwords once, falling back to an empty set.

    Note:
        If the stopwords corpus is not downloaded, a warning is logged and
        stop-word removal is skipped. To download it, run:
            python -c "import nltk; nltk.download('stopwords')"
    """
    global _nltk_stopwords

    if _nltk_stopwords is None:
        try:
            _nltk_stopwords = set(_nltk_stopwords_module.words("english"))
        except LookupError:
            log.warning(
                "NLTK stopwords data not found. Stop word removal will be skipped. "
                "To enable, run: python -c \"import nltk; nltk.download('stopwords')\""
            )
            _nltk_stopwords = set()
    return _nltk_stopwords


# -----------------------------------------------------------------------------
# Default abbreviations (long form -> short form), sorted by key
# -----------------------------------------------------------------------------
DEFAULT_ABBREVIATIONS: Dict[str, str] = {
    "address": "addr",
    "altitude": "alt",
    "amount": "amt",
    "attachment": "att",
    "average": "avg",
    "category": "cat",
    "coordinate": "coord",
    "county": "cnty",
    "date": "dt",
    "description": "desc",
    "distance": "dist",
    "elevation": "elev",
    "geometry": "geom",
    "identifier": "id",
    "latitude": "lat",
    "longitude": "lon",
    "maximum": "max",
    "minimum": "min",
    "number": "num",
    "photo": "pho",
    "population": "pop",
    "quantity": "qty",
    "source": "src",
    "station": "stn",
    "street": "st",
}

_default_abbrev_regex: Optional[Tuple[Pattern[str], Callable[[re.Match], str]]] = None


def _build_abbreviation_regex(
    abbreviations: Dict[str, str],
) -> Tuple[Pattern[str], Callable[[re.Match], str]]:
    """
    Compile all abbreviation keys into a single alternation pattern.

    Keys are sorted longest first so that longer words win over prefixes.
    Matching is done on whole words between underscores or word boundaries.
    """
    sorted_keys = sorted(abbreviations, key=len, reverse=True)
    pattern = re.compile(
        rf"(?<![a-z0-9])({'|'.join(re.escape(k) for k in sorted_keys)})(?![a-z0-9])",
        re.IGNORECASE,
    )
    lowercase_abbrevs = {k.lower(): v for k, v in abbreviations.items()}

    def replacer(match: re.Match) -> str:
        return lowercase_abbrevs.get(match.group(1).lower(), match.group(0))

    return pattern, replacer


def _get_default_abbrev_regex() -> Tuple[Pattern[str], Callable[[re.Match], str]]:
    global _default_abbrev_regex

    if _default_abbrev_regex is None:
        _default_abbrev_regex = _build_abbreviation_regex(DEFAULT_ABBREVIATIONS)
    return _default_abbrev_regex


# -----------------------------------------------------------------------------
# Compression helpers
# -----------------------------------------------------------------------------
def deduplicate_words(text: str) -> str:
    """
    Remove repeated words from an underscore-separated name, keeping order.

    Examples:
        >>> deduplicate_words("site_id_site")
        'site_id'
    """
    return "_".join(dict.fromkeys(w for w in text.split("_") if w))


def remove_inner_vowels(text: str) -> str:
    """
    Shorten each word by dropping vowels between its first and last letter.

    Words of two characters or fewer are kept as-is.

    Examples:
        >>> remove_inner_vowels("station_name")
        'sttn_nme'
    """
    result: List[str] = []
    for word in text.split("_"):
        if len(word) <= 2:
            result.append(word)
        else:
            middle = "".join(c for c in word[1:-1] if c not in "aeiou")
            result.append(word[0] + middle + word[-1])
    return "_".join(result)


_SPECIAL_CHAR_PATTERN = re.compile(r"[^a-z0-9]")
_MULTI_UNDERSCORE_PATTERN = re.compile(r"_+")
_IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


def _compress(candidate: str, max_length: int) -> str:
    if len(candidate) > max_length:
        candidate = deduplicate_words(candidate)
    if len(candidate) > max_length:
        candidate = remove_inner_vowels(candidate)
    if len(candidate) > max_length:
        candidate = candidate[:max_length].rstrip("_") or candidate[:max_length]
    return candidate


def _with_suffix(base: str, suffix: str, max_length: int) -> str:
    keep = max(max_length - len(suffix), 1)
    return f"{base[:keep].rstrip('_') or base[:keep]}{suffix}"


# -----------------------------------------------------------------------------
# Main normalization function
# -----------------------------------------------------------------------------
def normalize_field_names(
    names: Sequence[str],
    max_length: int = 63,
    stop_words: Optional[Set[str]] = None,
    abbreviations: Optional[Dict[str, str]] = None,
) -> Tuple[Dict[str, str], List[str]]:
    """
    Normalize field names into short, unique, identifier-safe names.

    Phase 1 - Sanitization:
        lowercase, abbreviate, replace special characters with underscores,
        drop stop words, collapse underscores, prefix a leading digit with "_"
    Phase 2 - Compression (only when longer than max_length):
        word deduplication, inner vowel removal, hard truncation
    Phase 3 - Collision resolution:
        deterministic "_1", "_2", ... suffixes within max_length

    Args:
        names: Field names in export order.
        max_length: Maximum length of a cleaned name (10 for DBF).
        stop_words: Words to drop. None uses the NLTK English list.
        abbreviations: Long -> short word map. None uses DEFAULT_ABBREVIATIONS,
            an empty dict disables abbreviation.

    Returns:
        Tuple of:
        - mapping: original name -> cleaned name
        - cleaned: cleaned names in input order

    Examples:
        >>> normalize_field_names(["Station Name", "Date of Survey"], max_length=10)
        ({'Station Name': 'stn_name', 'Date of Survey': 'dt_survey'}, ['stn_name', 'dt_survey'])
        >>> normalize_field_names(["Name", "Name"])[1]
        ['name', 'name_1']
    """
    if max_length < 2:
        raise ValueError(f"max_length must be at least 2, got {max_length}")

    if stop_words is None:
        stop_words = _get_nltk_stopwords()

    if abbreviations is None:
        abbrev_regex = _get_default_abbrev_regex()
    elif abbreviations:
        abbrev_regex = _build_abbreviation_regex(abbreviations)
    else:
        abbrev_regex = None

    mapping: Dict[str, str] = {}
    cleaned: List[str] = []
    seen: Dict[str, int] = {}  # cleaned name -> collision count

    for idx, original in enumerate(names):
        normalized = str(original).strip().lower()
        if abbrev_regex is not None:
            pattern, replacer = abbrev_regex
            normalized = pattern.sub(replacer, normalized)

        normalized = _SPECIAL_CHAR_PATTERN.sub("_", normalized)
        words = [w for w in normalized.split("_") if w]
        # A name made only of stop words (e.g. "y") is kept whole
        words = [w for w in words if w not in stop_words] or words
        normalized = _MULTI_UNDERSCORE_PATTERN.sub("_", "_".join(words)).strip("_")

        if not normalized:
            candidate = f"col_{idx}"
        elif normalized[0].isdigit():
            candidate = f"_{normalized}"
        else:
            candidate = normalized

        candidate = _compress(candidate, max_length)

        final_name = candidate
        while final_name in seen or not _IDENTIFIER_PATTERN.match(final_name):
            if not _IDENTIFIER_PATTERN.match(candidate):
                candidate = _compress(f"col_{idx}", max_length)
                final_name = candidate
                continue
            seen[candidate] = seen.get(candidate, 0) + 1
            final_name = _with_suffix(candidate, f"_{seen[candidate]}", max_length)
        seen.setdefault(final_name, 0)

        mapping[original] = final_name
        cleaned.append(final_name)

    return mapping, cleaned
