# ABOUTME: Framework-free handlers behind the /surfability and /health endpoints
# ABOUTME: Map orchestrator results and failures to (status code, JSON body) pairs

import logging
from datetime import datetime, timezone

from surfability.orchestrator import AppOrchestrator
from surfability.weather.sources import WeatherUnavailableError

log = logging.getLogger(__name__)

ERROR_MESSAGE = "Error fetching surf data"


def surfability_payload(orchestrator: AppOrchestrator) -> tuple[int, dict]:
    """
    Build the /surfability response.

    Returns:
        (200, report) on success, (503, error) when the weather API is down,
        (500, error) for anything unexpected.
    """
    try:
        return 200, orchestrator.get_surfability()
    except WeatherUnavailableError as e:
        log.error(f"Weather source unavailable: {e}")
        return 503, {"error": ERROR_MESSAGE, "message": str(e)}
    except Exception as e:
        log.exception("Unexpected error building surfability report")
        return 500, {"error": ERROR_MESSAGE, "message": str(e) or "Unknown error"}


def health_payload() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
