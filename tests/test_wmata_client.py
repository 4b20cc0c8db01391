"""Tests for WMATAClient."""

import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path

import requests

# Add src to path so we can import metrotime
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from metrotime.config import WMATASettings
from metrotime.models import BusIncident, Incident
from metrotime.wmata_client import UpstreamError, WMATAClient

STATIONS_PAYLOAD = {
    "Stations": [
        {
            "Code": "A01",
            "Name": "Metro Center",
            "LineCode1": "RD",
            "LineCode2": None,
            "LineCode3": None,
            "LineCode4": None,
            "StationTogether1": "C01",
            "StationTogether2": "",
        },
        {
            "Code": "C01",
            "Name": "Metro Center",
            "LineCode1": "BL",
            "LineCode2": "OR",
            "LineCode3": "SV",
            "LineCode4": None,
            "StationTogether1": "A01",
        },
        {
            "Code": "E10",
            "Name": "Greenbelt",
            "LineCode1": "GR",
            "LineCode2": None,
            "LineCode3": None,
            "LineCode4": None,
            "StationTogether1": "",
        },
    ]
}

PREDICTIONS_PAYLOAD = {
    "Trains": [
        {"Car": "8", "Destination": "Glenmont", "Group": "1", "Line": "RD",
         "LocationCode": "A01", "Min": "BRD"},
        {"Car": "6", "Destination": "Shady Gr", "Group": "2", "Line": "RD",
         "LocationCode": "A01", "Min": "5"},
    ]
}


class TestWMATAClient(unittest.TestCase):
    """Test WMATA feed fetching and parsing."""

    def setUp(self):
        self.settings = WMATASettings(api_key="test-key", timeout_seconds=3)
        self.session = MagicMock()
        self.response = MagicMock()
        self.session.get.return_value = self.response
        self.client = WMATAClient(self.settings, session=self.session)

    def test_get_stations_parses_line_codes(self):
        self.response.json.return_value = STATIONS_PAYLOAD

        stations = self.client.get_stations()

        self.assertEqual([s.code for s in stations], ["A01", "C01", "E10"])
        self.assertEqual(stations[0].line_codes, ("RD",))
        self.assertEqual(stations[1].line_codes, ("BL", "OR", "SV"))
        self.assertEqual(stations[0].station_together, "C01")
        self.assertIsNone(stations[2].station_together)

    def test_all_four_line_codes_extracted(self):
        self.response.json.return_value = {"Stations": [{
            "Code": "X01", "Name": "Test", "LineCode1": "RD", "LineCode2": "BL",
            "LineCode3": "OR", "LineCode4": "SV", "StationTogether1": "",
        }]}

        station = self.client.get_stations()[0]

        self.assertEqual(station.line_codes, ("RD", "BL", "OR", "SV"))

    def test_request_carries_key_and_timeout(self):
        self.response.json.return_value = STATIONS_PAYLOAD

        self.client.get_stations()

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://api.wmata.com/Rail.svc/json/jStations")
        self.assertEqual(kwargs["headers"], {"api_key": "test-key"})
        self.assertEqual(kwargs["timeout"], 3)

    def test_get_predictions(self):
        self.response.json.return_value = PREDICTIONS_PAYLOAD

        predictions = self.client.get_predictions("A01")

        self.assertEqual([p.minutes for p in predictions], ["BRD", "5"])
        self.assertEqual(predictions[0].destination, "Glenmont")
        self.assertEqual(predictions[0].location_code, "A01")
        url = self.session.get.call_args[0][0]
        self.assertTrue(url.endswith("/StationPrediction.svc/json/GetPrediction/A01"))

    def test_get_train_incidents(self):
        self.response.json.return_value = {"Incidents": [{
            "IncidentID": "3754F8B2", "Description": "Red Line: Delays", "IncidentType": "Delay",
            "LinesAffected": "RD;", "DateUpdated": "2010-07-29T14:21:28",
        }]}

        incidents = self.client.get_incidents("train")

        self.assertIsInstance(incidents[0], Incident)
        self.assertEqual(incidents[0].lines_affected, "RD;")
        self.assertTrue(self.session.get.call_args[0][0].endswith("/Incidents.svc/json/Incidents"))

    def test_get_bus_incidents(self):
        self.response.json.return_value = {"BusIncidents": [{
            "IncidentID": "1", "Description": "Detour", "IncidentType": "Alert",
            "RoutesAffected": ["70", "79"], "DateUpdated": "2014-10-28T08:13:03",
        }]}

        incidents = self.client.get_incidents("bus")

        self.assertIsInstance(incidents[0], BusIncident)
        self.assertEqual(incidents[0].routes_affected, ["70", "79"])
        self.assertTrue(self.session.get.call_args[0][0].endswith("/Incidents.svc/json/BusIncidents"))

    def test_unknown_transport_mode(self):
        with self.assertRaises(ValueError):
            self.client.get_incidents("ferry")
        self.session.get.assert_not_called()

    def test_get_bus_predictions(self):
        self.response.json.return_value = {
            "StopName": "Georgia Ave + Kennedy St",
            "Predictions": [
                {"RouteID": "70", "DirectionText": "South to Archives", "DirectionNum": "1",
                 "Minutes": 4, "VehicleID": "2201", "TripID": "123"},
            ],
        }

        stop = self.client.get_bus_predictions("1001195")

        self.assertEqual(stop.name, "Georgia Ave + Kennedy St")
        self.assertEqual(stop.predictions[0].route_id, "70")
        self.assertEqual(stop.predictions[0].minutes, 4)
        self.assertEqual(self.session.get.call_args[1]["params"], {"StopID": "1001195"})

    def test_connection_error_raises_upstream_error(self):
        self.session.get.side_effect = requests.ConnectionError("no route to host")

        with self.assertRaises(UpstreamError) as ctx:
            self.client.get_predictions("A01")
        self.assertEqual(ctx.exception.feed, "predictions:A01")

    def test_http_error_raises_upstream_error(self):
        self.response.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")

        with self.assertRaises(UpstreamError) as ctx:
            self.client.get_stations()
        self.assertEqual(ctx.exception.feed, "stations")

    def test_invalid_json_raises_upstream_error(self):
        self.response.json.side_effect = ValueError("Expecting value")

        with self.assertRaises(UpstreamError):
            self.client.get_incidents("train")

    def test_missing_payload_key_raises_upstream_error(self):
        self.response.json.return_value = {"statusCode": 401, "message": "Access denied"}

        with self.assertRaises(UpstreamError):
            self.client.get_predictions("A01")

    def test_malformed_record_raises_upstream_error(self):
        self.response.json.return_value = {"Stations": [{"Name": "No code"}]}

        with self.assertRaises(UpstreamError):
            self.client.get_stations()

    def test_null_station_name_raises_upstream_error(self):
        self.response.json.return_value = {"Stations": [
            {"Code": "Z99", "Name": None, "LineCode1": "RD", "StationTogether1": ""},
            {"Code": "A01", "Name": "Metro Center", "LineCode1": "RD", "StationTogether1": ""},
        ]}

        with self.assertRaises(UpstreamError) as ctx:
            self.client.get_stations()
        self.assertEqual(ctx.exception.feed, "stations")

    def test_empty_station_code_raises_upstream_error(self):
        self.response.json.return_value = {"Stations": [{"Code": "", "Name": "Metro Center"}]}

        with self.assertRaises(UpstreamError):
            self.client.get_stations()

    def test_stations_are_hashable(self):
        self.response.json.return_value = STATIONS_PAYLOAD

        stations = self.client.get_stations()

        self.assertEqual(len(set(stations)), 3)
        self.assertEqual(hash(stations[0]), hash(stations[0]))

    def test_close_closes_session(self):
        self.client.close()
        self.session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
