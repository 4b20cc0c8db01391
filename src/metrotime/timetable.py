"""Main WMATA timetable service."""

import logging
import re
from typing import List, Optional

from .config import WMATASettings
from .incidents import RouteExtractor, relevant_bus_incidents, relevant_incidents
from .models import LookupStatus, Station, Timetable, TrainPrediction
from .predictions import merge_predictions
from .station_matcher import resolve
from .wmata_client import BUS, TRAIN, UpstreamError, WMATAClient

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def sanitize_stop_id(stop: str) -> str:
    """Strip everything but digits from a spoken bus stop id."""
    return _NON_DIGITS.sub("", stop or "")


class WMATATimetable:
    """
    Answers timetable queries for Metrorail stations and Metrobus stops.

    This class provides methods to:
    - Resolve a spoken station name to a station
    - Get merged arrivals for both platforms of a station
    - Get the incidents affecting the station's lines

    Feed failures never raise; they leave the affected part of the
    Timetable empty and are listed in ``Timetable.failed_feeds``.
    """

    def __init__(
        self,
        settings: WMATASettings,
        client: Optional[WMATAClient] = None,
        bus_route_extractor: Optional[RouteExtractor] = None,
    ):
        """
        Initialize the timetable service.

        Args:
            settings: Configuration shared with the client.
            client: Optional preconfigured client (mainly for tests).
            bus_route_extractor: Maps a bus incident to its route ids. Without
                one, bus timetables carry no incidents.
        """
        self.settings = settings
        self.client = client or WMATAClient(settings)
        self.bus_route_extractor = bus_route_extractor

    def find_station(self, query: str) -> Optional[Station]:
        """
        Fetch the station list and resolve a station name.

        Raises:
            UpstreamError: If the station list cannot be fetched.
        """
        stations = self.client.get_stations()
        return resolve(query, stations, self.settings.fuzzy_threshold)

    def get_station_timetable(self, query: str) -> Timetable:
        """
        Get arrivals and incidents for a rail station.

        Args:
            query: Station name as spoken (e.g. "metro center").

        Returns:
            Timetable with status FOUND, NOT_FOUND or UPSTREAM_FAILURE.
        """
        try:
            station = self.find_station(query)
        except UpstreamError as e:
            logger.warning(f"Station list unavailable: {e}")
            return Timetable(status=LookupStatus.UPSTREAM_FAILURE, failed_feeds=[e.feed])
        except Exception as e:
            logger.warning(f"Failed to resolve station '{query}': {e}", exc_info=True)
            return Timetable(status=LookupStatus.UPSTREAM_FAILURE, failed_feeds=["stations"])

        if station is None:
            logger.info(f"No station found matching '{query}'")
            return Timetable(status=LookupStatus.NOT_FOUND)

        logger.info(f"Resolved '{query}' to {station.name} ({station.code})")
        failed_feeds: List[str] = []

        primary = self._fetch_predictions(station.code, failed_feeds)
        secondary = None
        if station.station_together:
            secondary = self._fetch_predictions(station.station_together, failed_feeds)
        predictions = merge_predictions(primary, secondary)

        try:
            incidents = relevant_incidents(station.line_codes, self.client.get_incidents(TRAIN))
        except UpstreamError as e:
            logger.warning(f"Rail incidents unavailable: {e}")
            failed_feeds.append(e.feed)
            incidents = []

        return Timetable(
            status=LookupStatus.FOUND,
            name=station.name,
            predictions=predictions,
            incidents=incidents,
            failed_feeds=failed_feeds,
        )

    def get_stop_timetable(self, stop: str) -> Timetable:
        """
        Get arrivals and incidents for a bus stop.

        Args:
            stop: Bus stop id, possibly with stray characters from speech input.

        Returns:
            Timetable with status FOUND, NOT_FOUND or UPSTREAM_FAILURE.
        """
        stop_id = sanitize_stop_id(stop)
        if not stop_id:
            logger.info(f"No digits in stop id '{stop}'")
            return Timetable(status=LookupStatus.NOT_FOUND)

        try:
            bus_stop = self.client.get_bus_predictions(stop_id)
        except UpstreamError as e:
            logger.warning(f"Bus predictions unavailable for stop {stop_id}: {e}")
            return Timetable(status=LookupStatus.UPSTREAM_FAILURE, failed_feeds=[e.feed])

        failed_feeds: List[str] = []
        route_ids = [p.route_id for p in bus_stop.predictions]
        try:
            bus_incidents = self.client.get_incidents(BUS)
        except UpstreamError as e:
            logger.warning(f"Bus incidents unavailable: {e}")
            failed_feeds.append(e.feed)
            bus_incidents = []

        try:
            incidents = relevant_bus_incidents(route_ids, bus_incidents, self.bus_route_extractor)
        except Exception as e:
            logger.warning(f"Bus route extractor failed: {e}", exc_info=True)
            incidents = []

        return Timetable(
            status=LookupStatus.FOUND,
            name=bus_stop.name,
            predictions=bus_stop.predictions,
            incidents=incidents,
            failed_feeds=failed_feeds,
        )

    def _fetch_predictions(self, station_code: str, failed_feeds: List[str]) -> List[TrainPrediction]:
        try:
            return self.client.get_predictions(station_code)
        except UpstreamError as e:
            logger.warning(f"Predictions unavailable for {station_code}: {e}")
            failed_feeds.append(e.feed)
            return []

    def close(self) -> None:
        """Release the client's HTTP session."""
        self.client.close()
        logger.info("Closed timetable client")
