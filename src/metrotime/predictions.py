"""Merge, order and clean Metrorail arrival predictions."""

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import TrainPrediction

BOARDING = "BRD"
ARRIVING = "ARR"

# Line and destination values the feed uses for trains not in passenger service
NON_PASSENGER_LINES = frozenset({"None", "No", "--"})
NON_PASSENGER_DESTINATIONS = frozenset({"ssenger", "Train", "No Passenger", "NoPssenger"})


def minutes_sort_key(minutes: str) -> Tuple[int, int]:
    """
    Sort key for a prediction's minutes value.

    Boarding sorts first, then arriving, then numeric minutes ascending.
    Unknown values ("---", blank) sort after every numeric value.
    """
    value = minutes.strip().upper()
    if value == BOARDING:
        return (0, 0)
    if value == ARRIVING:
        return (1, 0)
    if value.isdecimal():
        return (2, int(value))
    return (3, 0)


def is_passenger_train(prediction: TrainPrediction) -> bool:
    """Return False for the feed's placeholder entries for out-of-service trains."""
    return (
        prediction.line not in NON_PASSENGER_LINES
        and prediction.destination not in NON_PASSENGER_DESTINATIONS
    )


def sort_predictions(predictions: Iterable[TrainPrediction]) -> List[TrainPrediction]:
    """Stable sort by arrival, soonest first."""
    return sorted(predictions, key=lambda p: minutes_sort_key(p.minutes))


def merge_predictions(
    primary: Sequence[TrainPrediction],
    secondary: Optional[Sequence[TrainPrediction]] = None,
) -> List[TrainPrediction]:
    """
    Combine predictions for a station's platforms into one arrival list.

    Args:
        primary: Predictions for the resolved platform.
        secondary: Predictions for the paired platform, if the station has one.

    Returns:
        A new list of passenger trains sorted soonest first.
    """
    combined = list(primary) + list(secondary or [])
    return [p for p in sort_predictions(combined) if is_passenger_train(p)]
