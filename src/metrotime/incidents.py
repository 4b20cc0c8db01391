"""Pick out the service incidents that affect a station's lines."""

import re
from typing import Callable, Iterable, List, Optional, Sequence

from .models import BusIncident, Incident

_LINE_DELIMITERS = re.compile(r"[;,\s]+")

# Maps a bus incident to the route ids it affects
RouteExtractor = Callable[[BusIncident], Iterable[str]]


def split_lines(lines_affected: str) -> List[str]:
    """Split a joined line field such as "RD;OR;" into its codes."""
    return [token for token in _LINE_DELIMITERS.split(lines_affected or "") if token]


def relevant_incidents(line_ids: Iterable[str], incidents: Sequence[Incident]) -> List[Incident]:
    """
    Filter rail incidents down to those affecting any of ``line_ids``.

    Args:
        line_ids: Line codes served by the station (e.g. ["RD", "BL"]).
        incidents: Incident feed in published order.

    Returns:
        Matching incidents in feed order. Empty when ``line_ids`` is empty.
    """
    wanted = set(line_ids)
    if not wanted:
        return []

    return [
        incident for incident in incidents
        if wanted.intersection(split_lines(incident.lines_affected))
    ]


def relevant_bus_incidents(
    route_ids: Iterable[str],
    incidents: Sequence[BusIncident],
    route_extractor: Optional[RouteExtractor] = None,
) -> List[BusIncident]:
    """
    Filter bus incidents down to those affecting any of ``route_ids``.

    Without a ``route_extractor`` nothing is returned: how route ids are
    derived from a bus incident payload is left to the caller.
    """
    wanted = set(route_ids)
    if route_extractor is None or not wanted:
        return []

    return [
        incident for incident in incidents
        if wanted.intersection(route_extractor(incident))
    ]
