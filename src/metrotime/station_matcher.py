"""Resolve free-text station names against the Metrorail station list."""

import logging
import re
from difflib import SequenceMatcher
from typing import Optional, Sequence

from .config import DEFAULT_FUZZY_THRESHOLD
from .models import Station

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lower-case, drop punctuation and collapse whitespace."""
    text = _NON_WORD.sub(" ", name.lower())
    return _WHITESPACE.sub(" ", text).strip()


def _ratio(a: str, b: str) -> float:
    return SequenceMatcher(None, a, b).ratio()


def token_set_ratio(a: str, b: str) -> float:
    """
    Word-order tolerant similarity between two normalized strings.

    Compares the shared tokens against each side's shared + leftover tokens
    and keeps the best pairing, so "center metro" scores as "metro center".
    """
    tokens_a = set(a.split())
    tokens_b = set(b.split())
    if not tokens_a or not tokens_b:
        return 0.0

    common = " ".join(sorted(tokens_a & tokens_b))
    with_a = " ".join(filter(None, [common, " ".join(sorted(tokens_a - tokens_b))]))
    with_b = " ".join(filter(None, [common, " ".join(sorted(tokens_b - tokens_a))]))

    scores = [_ratio(with_a, with_b)]
    if common:
        scores.append(_ratio(common, with_a))
        scores.append(_ratio(common, with_b))
    return max(scores)


def similarity(query: str, name: str) -> float:
    """
    Score how closely ``query`` matches a station ``name``.

    Returns:
        A value in [0.0, 1.0]; the better of a character-level ratio and
        a token-set ratio of the normalized strings.
    """
    a = normalize_name(query)
    b = normalize_name(name)
    if not a or not b:
        return 0.0
    return max(_ratio(a, b), token_set_ratio(a, b))


def partial_search(query: str, stations: Sequence[Station]) -> Optional[Station]:
    """
    Find the first station whose name contains the query, or is contained in it.

    Args:
        query: Lower-cased station name as spoken by the user.
        stations: Station list in reference-data order.

    Returns:
        The first matching Station, or None.
    """
    if not query:
        return None

    for station in stations:
        name = station.name.lower()
        if query in name or name in query:
            return station
    return None


def fuzzy_search(
    query: str,
    stations: Sequence[Station],
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> Optional[Station]:
    """
    Find the most similar station at or above ``threshold``.

    Ties keep the first station encountered.
    """
    best: Optional[Station] = None
    best_score = threshold

    for station in stations:
        score = similarity(query, station.name)
        if score >= best_score and (best is None or score > best_score):
            best = station
            best_score = score

    if best is not None:
        logger.debug(f"Fuzzy matched '{query}' to '{best.name}' ({best_score:.2f})")
    return best


def resolve(
    query: str,
    stations: Sequence[Station],
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> Optional[Station]:
    """
    Resolve a station name, trying partial search before fuzzy search.

    Args:
        query: Station name in any case.
        stations: Station list in reference-data order.
        threshold: Minimum similarity for a fuzzy match.

    Returns:
        The matching Station, or None when nothing matches.
    """
    normalized = query.strip().lower()
    if not normalized:
        return None

    station = partial_search(normalized, stations)
    if station is None:
        station = fuzzy_search(normalized, stations, threshold)

    if station is None:
        logger.debug(f"No station matched '{query}'")
    return station
