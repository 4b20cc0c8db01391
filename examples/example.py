"""Example usage of WMATATimetable."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import metrotime
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError

from metrotime import LookupStatus, WMATASettings, WMATATimetable

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_timetable(timetable) -> None:
    """Display arrivals and incidents for a station or stop."""
    if timetable.status is LookupStatus.NOT_FOUND:
        print("Couldn't find that station or stop.")
        return
    if timetable.status is LookupStatus.UPSTREAM_FAILURE:
        print("WMATA is not answering right now, try again shortly.")
        return

    print(f"\n{timetable.name} (updated {timetable.last_updated.strftime('%H:%M:%S')})")
    print("-" * 70)
    if timetable.predictions:
        for prediction in timetable.predictions:
            if hasattr(prediction, "line"):
                print(f"  {prediction.line:>3}: {prediction.minutes:>4} min → {prediction.destination}")
            else:
                print(f"  {prediction.route_id:>4}: {prediction.minutes:>4} min → {prediction.direction_text}")
    else:
        print("  No arrivals right now")

    if timetable.incidents:
        print("\nSERVICE INCIDENTS:")
        for incident in timetable.incidents:
            print(f"  {incident.description}")

    if timetable.degraded:
        print(f"\n(Some data unavailable: {', '.join(timetable.failed_feeds)})")
    print()


def lookup(timetable_service: WMATATimetable, query: str) -> None:
    """Treat numeric input as a bus stop id, anything else as a station name."""
    if any(ch.isdigit() for ch in query) and not any(ch.isalpha() for ch in query):
        print_timetable(timetable_service.get_stop_timetable(query))
    else:
        print_timetable(timetable_service.get_station_timetable(query))


def interactive_mode(timetable_service: WMATATimetable) -> None:
    """
    Run in interactive mode, allowing user to query multiple stations.
    """
    print("WMATA Timetable - Interactive Mode")
    print("Enter a station name or bus stop id to see arrivals and incidents")
    print("(Type 'quit' to exit)\n")

    while True:
        try:
            user_input = input("Enter station or stop (or 'quit'): ").strip()

            if user_input.lower() in ["quit", "q", "exit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            lookup(timetable_service, user_input)

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break


if __name__ == "__main__":
    try:
        settings = WMATASettings()
    except ValidationError:
        print("Set WMATA_API_KEY to your WMATA developer key.")
        sys.exit(1)

    service = WMATATimetable(settings)
    try:
        if len(sys.argv) > 1:
            # Command line mode: pass station name or stop id as argument
            lookup(service, " ".join(sys.argv[1:]))
        else:
            interactive_mode(service)
    finally:
        service.close()
