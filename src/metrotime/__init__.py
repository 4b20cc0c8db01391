"""metrotime - WMATA rail and bus timetable lookups for voice assistants."""

__version__ = "0.1.0"

from .config import WMATASettings
from .models import (
    BusIncident,
    BusPrediction,
    BusStop,
    Incident,
    LookupStatus,
    Station,
    Timetable,
    TrainPrediction,
)
from .timetable import WMATATimetable, sanitize_stop_id
from .wmata_client import UpstreamError, WMATAClient

__all__ = [
    "WMATATimetable",
    "WMATAClient",
    "WMATASettings",
    "UpstreamError",
    "sanitize_stop_id",
    "Station",
    "TrainPrediction",
    "BusPrediction",
    "BusStop",
    "Incident",
    "BusIncident",
    "LookupStatus",
    "Timetable",
]
