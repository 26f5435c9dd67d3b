"""
Estimator configuration — single source of truth for the standard member
lengths, spacings, yields and environment settings.

Import from here in all engines and routes rather than hardcoding values.
"""
from __future__ import annotations

import os

# ── Panel yield ────────────────────────────────────────────────────────────────

# Usable area of one 1.22 m × 2.44 m panel
PANEL_YIELD_M2: float = 2.98

# Segment/face areas below this are pooled fractionally before rounding
SMALL_AREA_THRESHOLD_M2: float = 1.5

# ── Standard member lengths (m) ────────────────────────────────────────────────

POST_STANDARD_LENGTH_M: float = 3.66
CHANNEL_STANDARD_LENGTH_M: float = 3.05
ANGLE_STANDARD_LENGTH_M: float = 2.44
SUPPORT_CHANNEL_STANDARD_LENGTH_M: float = 3.66

# ── Splices and allowances (m) ─────────────────────────────────────────────────

POST_SPLICE_M: float = 0.30
ANGLE_SPLICE_M: float = 0.15
HANGER_EXTRA_M: float = 0.10

# ── Spacings (m) ───────────────────────────────────────────────────────────────

FURRING_SPACING_M: float = 0.40
SUPPORT_SPACING_M: float = 0.90

# ── Wall rules ─────────────────────────────────────────────────────────────────

# A 2-face wall return within these raw limits is covered by a single panel
TWO_FACE_MAX_WIDTH_M: float = 0.60
TWO_FACE_MAX_HEIGHT_M: float = 2.44

# Double-structure walls narrower than this get 4× raw width of track
SHORT_DOUBLE_WALL_WIDTH_M: float = 0.75

# ── Trim rules ─────────────────────────────────────────────────────────────────

TRIM_WASTE_FACTOR: float = 0.15

# ── Finishing / fastener ratios ────────────────────────────────────────────────

COMPOUND_M2_PER_BOX: float = 22.0
PAPER_TAPE_M_PER_PANEL: float = 7.0
BASECOAT_M2_PER_SACK: float = 8.0
MESH_TAPE_M_PER_M2: float = 1.0
PANELS_PER_SANDPAPER_SHEET: float = 2.0
PANEL_SCREWS_PER_PANEL: int = 40
STRUCTURE_SCREWS_PER_POST: int = 4
ANCHORS_PER_CHANNEL: int = 8
ANCHORS_PER_ANGLE: int = 5
ANGLE_SCREWS_PER_PIECE: int = 5
FURRING_SCREWS_PER_PIECE: int = 12
HANGER_SCREWS_PER_PIECE: int = 2

# ── Environment settings ───────────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json").lower()
DOWNLOAD_DIR: str = os.getenv("DOWNLOAD_DIR", "/tmp/downloads")
MAX_IMPORT_ROWS: int = int(os.getenv("MAX_IMPORT_ROWS", "5000"))

_CORS_DEFAULT = "http://localhost:3000,http://localhost:8000"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _CORS_DEFAULT).split(",") if o.strip()
]
