# ABOUTME: NDBC spectral wave (.spec) feed client and parser
# ABOUTME: Turns the raw buoy text into a BuoyReading or None when unusable

import logging
import math
import requests
from typing import Optional

from surfability.config import Config
from surfability.weather.models import BuoyReading
from surfability.weather.units import meters_to_feet

log = logging.getLogger(__name__)

MIN_COLUMNS = 8
MIN_PERIOD_S = 2.0
MAX_PERIOD_S = 30.0
MIN_HEIGHT_M = 0.0
MAX_HEIGHT_M = 20.0
MIN_DIRECTION_DEG = 0.0
MAX_DIRECTION_DEG = 360.0

# Positions used when the data row doesn't line up with the header.
# Date/time prefix is stable, so WVHT and SwP are counted from the front;
# APD and MWD are always the last two columns.
WVHT_INDEX = 5
SWP_INDEX = 7
APD_INDEX = -2
MWD_INDEX = -1

UNITS_MARKER = "yr  mo dy hr mn"


def _to_float(value: Optional[str]) -> Optional[float]:
    """Parse a feed value, returning None for NDBC's 'MM', nan/inf and other junk."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _period_in_range(period: Optional[float]) -> bool:
    return period is not None and MIN_PERIOD_S <= period <= MAX_PERIOD_S


def _is_data_line(line: str) -> bool:
    return (
        not line.startswith("#")
        and "YY" not in line
        and "WVHT" not in line
        and UNITS_MARKER not in line
    )


def _columns(header: list[str], parts: list[str]) -> dict[str, Optional[str]]:
    """Pick WVHT/SwP/APD/MWD out of a data row."""
    if len(parts) == len(header):
        row = dict(zip(header, parts))
        return {name: row.get(name) for name in ("WVHT", "SwP", "APD", "MWD")}

    log.info(
        f"Buoy row has {len(parts)} columns, header has {len(header)}; "
        "using positional layout"
    )
    return {
        "WVHT": parts[WVHT_INDEX],
        "SwP": parts[SWP_INDEX],
        "APD": parts[APD_INDEX],
        "MWD": parts[MWD_INDEX],
    }


def _row_values(header: list[str], parts: list[str]) -> Optional[tuple[float, float, float]]:
    """
    (height m, period s, direction deg) from one row, or None when any of
    them is missing. SwP falls back to APD when it is missing or implausible.
    """
    columns = _columns(header, parts)

    wave_height_m = _to_float(columns["WVHT"])
    direction = _to_float(columns["MWD"])
    wave_period = _to_float(columns["SwP"])
    if not _period_in_range(wave_period):
        wave_period = _to_float(columns["APD"])
        log.info(f"Using APD instead of SwP: {wave_period}")

    if wave_height_m is None or wave_period is None or direction is None:
        log.info(
            f"Skipping incomplete buoy row: height={columns['WVHT']} "
            f"period={columns['SwP']}/{columns['APD']} direction={columns['MWD']}"
        )
        return None
    return wave_height_m, wave_period, direction


def parse_buoy_feed(text: str) -> Optional[BuoyReading]:
    """
    Parse the most recent complete observation from an NDBC .spec feed.

    The feed has a '#'-prefixed header row, a units row, then whitespace
    separated rows with the newest observation first:

        #YY  MM DD hh mm WVHT  SwH  SwP  WWH  WWP SwD WWD  STEEPNESS  APD MWD
        #yr  mo dy hr mn    m    m  sec    m  sec  -  degT     -      sec degT
        2025 06 13 20 26  0.8  0.2 10.5  0.7  8.3   E   E        N/A  4.1  98

    Rows that are too short or missing height, period or direction ('MM')
    are skipped in favor of the next older row. The first complete row is
    then range-checked.

    Args:
        text: Raw feed body

    Returns:
        BuoyReading, or None when no row is complete or the values fail
        validation. Never raises.
    """
    if not text:
        return None

    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 3:
        log.info("Buoy feed too short to contain data")
        return None

    header_line = next(
        (line for line in lines if "WVHT" in line and ("SwP" in line or "APD" in line)),
        None
    )
    if header_line is None:
        log.warning("Could not find buoy header line with WVHT and SwP/APD")
        return None
    header = header_line.lstrip("#").split()

    values = None
    for line in lines:
        if not _is_data_line(line):
            continue
        parts = line.split()
        if len(parts) < MIN_COLUMNS:
            log.info(f"Skipping short buoy row with {len(parts)} columns")
            continue
        values = _row_values(header, parts)
        if values is not None:
            break

    if values is None:
        log.warning("No complete buoy observation in feed")
        return None

    wave_height_m, wave_period, direction = values

    if not _period_in_range(wave_period):
        log.warning(f"Buoy wave period out of range: {wave_period}")
        return None

    if not MIN_HEIGHT_M <= wave_height_m <= MAX_HEIGHT_M:
        log.warning(f"Buoy wave height out of range: {wave_height_m}")
        return None

    if not MIN_DIRECTION_DEG <= direction <= MAX_DIRECTION_DEG:
        log.warning(f"Buoy wave direction out of range: {direction}")
        return None

    reading = BuoyReading(
        wave_height_ft=meters_to_feet(wave_height_m),
        wave_period_s=wave_period,
        mean_wave_direction_deg=direction,
    )
    log.info(f"Parsed buoy data: {reading}")
    return reading


class BuoyClient:
    """Client for the NDBC real-time spectral wave feed"""

    def __init__(self, station_id: str = None, timeout: float = None):
        self.station_id = station_id or Config.BUOY_STATION_ID
        self.timeout = timeout or Config.BUOY_TIMEOUT_SECONDS

    @property
    def url(self) -> str:
        return Config.BUOY_URL_TEMPLATE.format(station=self.station_id)

    def fetch_text(self) -> Optional[str]:
        """
        Fetch the raw .spec feed.

        Returns:
            Feed body on success, None on any error.
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            if response.status_code != 200:
                log.warning(f"Buoy feed returned HTTP {response.status_code}")
                return None
            return response.text
        except requests.RequestException as e:
            log.warning(f"Failed to fetch buoy data: {e}")
            return None

    def fetch(self) -> Optional[BuoyReading]:
        """Fetch and parse the latest buoy observation."""
        text = self.fetch_text()
        if text is None:
            return None
        return parse_buoy_feed(text)
