"""WMATA JSON API fetcher and parser."""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from .config import WMATASettings
from .models import BusIncident, BusPrediction, BusStop, Incident, Station, TrainPrediction

logger = logging.getLogger(__name__)

TRAIN = "train"
BUS = "bus"

STATIONS_PATH = "/Rail.svc/json/jStations"
PREDICTIONS_PATH = "/StationPrediction.svc/json/GetPrediction/{code}"
BUS_PREDICTIONS_PATH = "/NextBusService.svc/json/jPredictions"

# Incident endpoints and the payload key holding the records, per transport mode
INCIDENT_FEEDS = {
    TRAIN: ("/Incidents.svc/json/Incidents", "Incidents"),
    BUS: ("/Incidents.svc/json/BusIncidents", "BusIncidents"),
}


class UpstreamError(Exception):
    """A WMATA feed could not be fetched or parsed."""

    def __init__(self, feed: str, message: str):
        super().__init__(f"{feed}: {message}")
        self.feed = feed


class WMATAClient:
    """Fetches and parses WMATA rail and bus data."""

    def __init__(self, settings: WMATASettings, session: Optional[requests.Session] = None):
        """
        Initialize the WMATA client.

        Args:
            settings: API key, base URL and timeout.
            session: Optional requests session; one is created if omitted.
        """
        self.settings = settings
        self._session = session or requests.Session()

    def get_stations(self) -> List[Station]:
        """
        Get every Metrorail platform.

        Returns:
            List of Station objects in reference-data order.
        """
        payload = self._get_json("stations", STATIONS_PATH)
        records = self._require(payload, "Stations", "stations")
        return self._parse(records, Station, "stations")

    def get_predictions(self, station_code: str) -> List[TrainPrediction]:
        """
        Get real-time train predictions for one platform.

        Args:
            station_code: Platform code (e.g. "A01").

        Returns:
            List of TrainPrediction objects in feed order.
        """
        feed = f"predictions:{station_code}"
        payload = self._get_json(feed, PREDICTIONS_PATH.format(code=station_code))
        records = self._require(payload, "Trains", feed)
        return self._parse(records, TrainPrediction, feed)

    def get_incidents(self, transport: str) -> List[Union[Incident, BusIncident]]:
        """
        Get all incidents currently affecting Metrorail or Metrobus.

        Args:
            transport: Either "train" or "bus".

        Returns:
            List of Incident (train) or BusIncident (bus) objects.

        Raises:
            ValueError: If transport is not a known mode.
        """
        if transport not in INCIDENT_FEEDS:
            raise ValueError(f"Unknown transport mode '{transport}'")

        path, key = INCIDENT_FEEDS[transport]
        feed = f"incidents:{transport}"
        records = self._require(self._get_json(feed, path), key, feed)
        model = Incident if transport == TRAIN else BusIncident
        return self._parse(records, model, feed)

    def get_bus_predictions(self, stop_id: str) -> BusStop:
        """
        Get real-time bus predictions for a stop.

        Args:
            stop_id: Numeric bus stop id (e.g. "1001195").

        Returns:
            BusStop with the stop name and its predictions.
        """
        feed = f"bus_predictions:{stop_id}"
        payload = self._get_json(feed, BUS_PREDICTIONS_PATH, params={"StopID": stop_id})
        records = self._require(payload, "Predictions", feed)
        return BusStop(
            stop_id=stop_id,
            name=payload.get("StopName") or "",
            predictions=self._parse(records, BusPrediction, feed),
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _get_json(self, feed: str, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Fetch one endpoint and decode its JSON body.

        Raises:
            UpstreamError: On transport errors, non-2xx responses or invalid JSON.
        """
        url = f"{self.settings.root_url}{path}"
        logger.debug(f"Fetching {url}")
        try:
            response = self._session.get(
                url,
                params=params,
                headers={"api_key": self.settings.api_key},
                timeout=self.settings.timeout_seconds,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise UpstreamError(feed, str(e)) from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise UpstreamError(feed, "invalid JSON") from e

    @staticmethod
    def _require(payload: Any, key: str, feed: str) -> list:
        """Return ``payload[key]`` as a list or raise UpstreamError."""
        if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
            raise UpstreamError(feed, f"response has no '{key}' list")
        return payload[key]

    @staticmethod
    def _parse(records: list, model: Any, feed: str) -> list:
        """Build ``model`` objects from raw records or raise UpstreamError."""
        try:
            return [model.from_json(record) for record in records]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse {feed}: {e}")
            raise UpstreamError(feed, f"malformed record: {e}") from e
