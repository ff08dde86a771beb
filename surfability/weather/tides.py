# ABOUTME: Tide state estimation from time of day or NOAA CO-OPS predictions
# ABOUTME: Any tide station failure degrades to the fixed DEFAULT_TIDE snapshot

import logging
import math
import requests
from datetime import datetime, timedelta
from typing import Optional

from surfability.config import Config
from surfability.weather.models import DEFAULT_TIDE, TideEvent, TideSnapshot, TideState

log = logging.getLogger(__name__)

NOAA_TIME_FORMAT = "%Y-%m-%d %H:%M"
NOAA_DATE_FORMAT = "%Y%m%d"

# Height within this fraction of the high-low range around the midpoint is "Mid"
MID_BAND_FRACTION = 0.25

HEURISTIC_HEIGHT_FT = 1.5


def heuristic_tide_state(hour: int) -> TideState:
    """
    Rough tide phase from the hour of day.

    Treats the tide as a fixed 12-hour cycle. Always returns one of
    Low, Rising, High or Falling.
    """
    phase = hour % 12
    if phase < 2 or phase > 10:
        return TideState.LOW
    if 5 <= phase <= 7:
        return TideState.HIGH
    if phase < 5:
        return TideState.RISING
    return TideState.FALLING


def heuristic_snapshot(now: datetime) -> TideSnapshot:
    return TideSnapshot(
        height_ft=HEURISTIC_HEIGHT_FT,
        state=heuristic_tide_state(now.hour),
        source="heuristic",
    )


def _parse_time(value: str) -> datetime:
    return datetime.strptime(value, NOAA_TIME_FORMAT)


def parse_hilo_events(payload: Optional[dict]) -> list[TideEvent]:
    """Parse a hi/lo predictions payload into time-ordered TideEvents."""
    if not payload:
        return []

    events = []
    for entry in payload.get("predictions", []):
        try:
            kind = entry["type"]
            if kind not in ("H", "L"):
                continue
            events.append(TideEvent(
                time=_parse_time(entry["t"]),
                kind=kind,
                height_ft=float(entry["v"]),
            ))
        except (KeyError, TypeError, ValueError) as e:
            log.debug(f"Skipping malformed tide prediction {entry}: {e}")
    return sorted(events, key=lambda event: event.time)


def _latest_observation(payload: Optional[dict]) -> Optional[float]:
    """Water level from a 'date=latest' payload, or None."""
    if not payload:
        return None
    try:
        return float(payload["data"][0]["v"])
    except (KeyError, IndexError, TypeError, ValueError):
        return None


def _nearest_interval_prediction(payload: Optional[dict], now: datetime) -> Optional[float]:
    """Height of the 6-minute prediction closest to now, or None."""
    if not payload:
        return None

    best = None
    for entry in payload.get("predictions", []):
        try:
            offset = abs((_parse_time(entry["t"]) - now).total_seconds())
            height = float(entry["v"])
        except (KeyError, TypeError, ValueError):
            continue
        if best is None or offset < best[0]:
            best = (offset, height)
    return best[1] if best else None


def _interpolate_between(previous: TideEvent, upcoming: TideEvent, now: datetime) -> float:
    """Cosine interpolation between two consecutive hi/lo events."""
    span = (upcoming.time - previous.time).total_seconds()
    if span <= 0:
        return previous.height_ft
    fraction = (now - previous.time).total_seconds() / span
    fraction = min(max(fraction, 0.0), 1.0)
    weight = (1 - math.cos(math.pi * fraction)) / 2
    return previous.height_ft + (upcoming.height_ft - previous.height_ft) * weight


def _first_after(events: list[TideEvent], now: datetime, kind: str) -> Optional[TideEvent]:
    return next((e for e in events if e.kind == kind and e.time > now), None)


def _last_before(events: list[TideEvent], now: datetime, kind: str) -> Optional[TideEvent]:
    return next((e for e in reversed(events) if e.kind == kind and e.time <= now), None)


def classify_tide(
    height_ft: float,
    now: datetime,
    next_high: Optional[TideEvent],
    next_low: Optional[TideEvent],
    previous_high: Optional[TideEvent] = None,
    previous_low: Optional[TideEvent] = None,
) -> TideState:
    """
    Classify the tide from the upcoming events and the current height.

    Whichever of next high / next low comes sooner decides Rising vs
    Falling. If the height sits near the middle of the high-low range the
    state is refined to Mid.
    """
    if next_high is None and next_low is None:
        return TideState.UNKNOWN

    if next_low is None:
        state = TideState.RISING
    elif next_high is None:
        state = TideState.FALLING
    else:
        to_high = next_high.time - now
        to_low = next_low.time - now
        state = TideState.RISING if to_high < to_low else TideState.FALLING

    high = next_high or previous_high
    low = next_low or previous_low
    if high is not None and low is not None:
        tide_range = high.height_ft - low.height_ft
        midpoint = (high.height_ft + low.height_ft) / 2
        if tide_range > 0 and abs(height_ft - midpoint) <= tide_range * MID_BAND_FRACTION:
            return TideState.MID

    return state


def estimate_tide(
    latest_payload: Optional[dict],
    hilo_payload: Optional[dict],
    now: datetime,
    interval_payload: Optional[dict] = None,
) -> TideSnapshot:
    """
    Build a TideSnapshot from NOAA CO-OPS payloads.

    Args:
        latest_payload: water_level 'date=latest' response ({"data": [{"v": ...}]})
        hilo_payload: hi/lo predictions ({"predictions": [{"t", "type", "v"}]})
        now: Current local station time (naive, same clock as the payloads)
        interval_payload: Optional 6-minute predictions used when no live
            observation is available

    Returns:
        TideSnapshot, DEFAULT_TIDE when there is not enough data.
    """
    events = parse_hilo_events(hilo_payload)
    if not events:
        log.warning("No tide predictions available, using default tide")
        return DEFAULT_TIDE

    next_high = _first_after(events, now, "H")
    next_low = _first_after(events, now, "L")
    previous_high = _last_before(events, now, "H")
    previous_low = _last_before(events, now, "L")

    height = _latest_observation(latest_payload)
    source = "observed"
    if height is None:
        source = "predicted"
        height = _nearest_interval_prediction(interval_payload, now)
    if height is None:
        previous = next((e for e in reversed(events) if e.time <= now), None)
        upcoming = next((e for e in events if e.time > now), None)
        if previous is None or upcoming is None:
            log.warning("Tide predictions don't bracket the current time, using default tide")
            return DEFAULT_TIDE
        height = _interpolate_between(previous, upcoming, now)

    state = classify_tide(height, now, next_high, next_low, previous_high, previous_low)
    return TideSnapshot(
        height_ft=height,
        state=state,
        next_high=next_high,
        next_low=next_low,
        previous_high=previous_high,
        previous_low=previous_low,
        source=source,
    )


class TideClient:
    """Client for NOAA CO-OPS water levels and tide predictions"""

    def __init__(self, station_id: str = None, timeout: float = None):
        self.station_id = station_id or Config.TIDE_STATION_ID
        self.timeout = timeout or Config.TIDE_TIMEOUT_SECONDS

    def _base_params(self) -> dict:
        return {
            "station": self.station_id,
            "datum": "MLLW",
            "units": "english",
            "time_zone": "lst_ldt",
            "format": "json",
            "application": "surfability",
        }

    def _get(self, params: dict) -> Optional[dict]:
        try:
            response = requests.get(Config.TIDE_API_URL, params=params, timeout=self.timeout)
            if response.status_code != 200:
                log.warning(f"Tide API returned HTTP {response.status_code}")
                return None
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            log.warning(f"Tide API request failed: {e}")
            return None

        if "error" in data:
            log.warning(f"Tide API error: {data['error']}")
            return None
        return data

    def fetch_latest(self) -> Optional[dict]:
        """Latest observed water level."""
        return self._get({**self._base_params(), "product": "water_level", "date": "latest"})

    def fetch_predictions(self, now: datetime, interval: str = "hilo") -> Optional[dict]:
        """Predictions from a day before to a day after now."""
        params = {
            **self._base_params(),
            "product": "predictions",
            "interval": interval,
            "begin_date": (now - timedelta(days=1)).strftime(NOAA_DATE_FORMAT),
            "end_date": (now + timedelta(days=1)).strftime(NOAA_DATE_FORMAT),
        }
        return self._get(params)

    def snapshot(self, now: datetime) -> TideSnapshot:
        """
        Current tide snapshot for the station.

        Args:
            now: Current local station time (naive)

        Returns:
            TideSnapshot; DEFAULT_TIDE if the station can't be reached.
        """
        hilo = self.fetch_predictions(now)
        if hilo is None:
            return DEFAULT_TIDE

        latest = self.fetch_latest()
        interval = None
        if _latest_observation(latest) is None:
            interval = self.fetch_predictions(now, interval="6")

        try:
            return estimate_tide(latest, hilo, now, interval)
        except (TypeError, ValueError) as e:
            log.warning(f"Tide estimation failed: {e}")
            return DEFAULT_TIDE
