"""Name ordering and canonicalization shared by the scanner and group planner."""
import os
import re
import unicodedata

_CHUNKS = re.compile(r"(\d+)|([^\W\d_]+)|(.)", re.DOTALL)
_WHITESPACE = re.compile(r"\s+")


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def name_sort_key(value: str) -> tuple:
    """Sort key comparing case- and accent-insensitively, with digit runs as numbers.

    ``"skill-2"`` sorts before ``"skill-10"`` and ``"Alpha"`` next to ``"alpha"``.
    Punctuation and spaces sort before digits, digits before letters.
    The raw value is the final tie breaker so ordering stays deterministic.
    """
    chunks = []
    for digits, letters, other in _CHUNKS.findall(_fold(value)):
        if digits:
            chunks.append((1, int(digits), ""))
        elif letters:
            chunks.append((2, 0, letters))
        else:
            chunks.append((0, 0, other))
    return (tuple(chunks), value)


def canonical_path(raw: str) -> str:
    """Absolute, user-expanded, symlink-resolved form of a path."""
    return os.path.realpath(os.path.expanduser(raw.strip()))


def normalize_group_name(raw: str) -> str:
    """Trim and collapse internal whitespace: ``"  Writing   Core "`` -> ``"Writing Core"``."""
    return _WHITESPACE.sub(" ", raw.strip())


def group_key(raw: str) -> str:
    """Comparison key for group names. Never used for display."""
    return normalize_group_name(raw).casefold()
