"""
Settings for the Iberia Chronos explorer.
Bedrock settings come from env vars (AWS_REGION, AWS_PROFILE, BEDROCK_MODEL_ID,
BEDROCK_MAX_TOKENS, BEDROCK_TEMPERATURE); everything else is fixed.
"""
from __future__ import annotations

import os

# ── Bedrock ──────────────────────────────────────────────────────────────────
AWS_REGION          = os.environ.get("AWS_REGION", "us-east-1")
AWS_PROFILE         = os.environ.get("AWS_PROFILE") or None
BEDROCK_MODEL_ID    = os.environ.get("BEDROCK_MODEL_ID", "anthropic.claude-3-5-haiku-20241022-v1:0")
BEDROCK_MAX_TOKENS  = int(os.environ.get("BEDROCK_MAX_TOKENS", "4096"))
BEDROCK_TEMPERATURE = float(os.environ.get("BEDROCK_TEMPERATURE", "0.4"))

LOG_LEVEL = os.environ.get("CHRONOS_LOG_LEVEL", "INFO").upper()

# ── Years ────────────────────────────────────────────────────────────────────
MIN_YEAR     = -3000
MAX_YEAR     = 2026
DEFAULT_YEAR = 2024

# ── Region (Iberian Peninsula) ───────────────────────────────────────────────
REGION_NAME    = "Iberian Peninsula"
REGION_LAT     = (35.5, 43.8)
REGION_LON     = (-9.5, 3.5)
MAX_ENTITIES   = 8
BOUNDARY_MIN_POINTS = 12
BOUNDARY_MAX_POINTS = 18
DESCRIPTION_MAX_CHARS = 150

# ── Fallback shown when the model call fails ─────────────────────────────────
FALLBACK_ENTITY_NAME  = "Information Unavailable"
FALLBACK_ENTITY_COLOR = "#94a3b8"
FALLBACK_DESCRIPTION  = "Connection error or data unavailable for this specific era."
FALLBACK_BOUNDARY: list[list[float]] = [[36, -9], [36, 3], [43, 3], [43, -9]]

# ── Map ──────────────────────────────────────────────────────────────────────
MAP_CENTER = [40.0, -3.7]
MAP_ZOOM   = 6
TILE_URL   = "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)

# Polygon styles: base / hover / selected
STYLE_BASE     = {"fillOpacity": 0.45, "weight": 1.5}
STYLE_HOVER    = {"fillOpacity": 0.7,  "weight": 2.5}
STYLE_SELECTED = {"fillOpacity": 0.8,  "weight": 4}

# ── User-facing messages ─────────────────────────────────────────────────────
YEAR_RANGE_ERROR = "Valid range: 3000 BC to 2026 CE"
LOAD_FAILED_ERROR = "Failed to load historical data."
