# ABOUTME: Main NiceGUI web application entry point
# ABOUTME: Serves the JSON surfability API, a health check and a simple status page

import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from nicegui import app, run, ui

from surfability.api import health_payload, surfability_payload
from surfability.config import Config
from surfability.orchestrator import AppOrchestrator

logging.basicConfig(
    level=logging.DEBUG if Config.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
log = logging.getLogger(__name__)

# One orchestrator (and cache) per process
orchestrator = AppOrchestrator()

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


@app.get('/surfability')
async def surfability():
    """Current surfability report as JSON"""
    status, body = await run.io_bound(surfability_payload, orchestrator)
    return JSONResponse(body, status_code=status)


@app.get('/health')
def health():
    return health_payload()


@ui.page('/')
async def index():
    """Human-readable version of the report"""
    ui.add_head_html("""
    <style>
        body {
            background-color: #FFFFFF;
            color: #000000;
            font-family: Arial, sans-serif;
        }
        .title { font-size: clamp(24px, 6vw, 48px); font-weight: bold; text-align: center; }
        .rating { font-size: clamp(48px, 16vw, 96px); font-weight: bold; text-align: center; }
        .detail { font-size: clamp(12px, 3vw, 16px); text-align: center; }
        .timestamp { font-size: 12px; color: #666666; text-align: center; }
    </style>
    """)

    with ui.column().classes('w-full items-center'):
        ui.html(f'<div class="title">CAN I SURF {Config.LOCATION_NAME.upper()}</div>', sanitize=False)
        rating_label = ui.html('<div class="rating">...</div>', sanitize=False)
        duration_label = ui.html('<div class="detail"></div>', sanitize=False)
        details_label = ui.html('<div class="detail"></div>', sanitize=False)
        timestamp_label = ui.html('<div class="timestamp"></div>', sanitize=False)

    status, data = await run.io_bound(surfability_payload, orchestrator)
    if status != 200:
        rating_label.content = '<div class="rating">N/A</div>'
        duration_label.content = '<div class="detail">Weather data unavailable. Try again later.</div>'
        return

    details = data["details"]
    weather = data["weather"]
    rating_label.content = f'<div class="rating">{data["rating"]} ({data["score"]})</div>'
    duration_label.content = f'<div class="detail">{data["goodSurfDuration"]}</div>'
    details_label.content = (
        f'<div class="detail">'
        f'{details["wave_height_ft"]}ft @ {details["wave_period_sec"]}s from {details["swell_direction_deg"]}° | '
        f'Wind {details["wind_speed_kts"]}kts from {details["wind_direction_deg"]}° | '
        f'Tide {details["tide_state"]} | '
        f'Air {weather["air_temperature_f"]}°F, Water {weather["water_temperature_f"]}°F, '
        f'{weather["weather_description"]}'
        f'</div>'
    )
    timestamp_label.content = (
        f'<div class="timestamp">Source: {details["data_source"]} | {data["timestamp"]}</div>'
    )


if __name__ in {"__main__", "__mp_main__"}:
    log.info(f"Surfability API running on port {Config.PORT}")
    ui.run(
        title='Surfability',
        host='0.0.0.0',
        port=Config.PORT,
        reload=False  # Disable reload in production
    )
