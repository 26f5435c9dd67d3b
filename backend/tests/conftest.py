"""
conftest.py — Shared pytest fixtures for the Tablayeso estimator test suite.

Engine tests are pure unit tests; report and API tests write files only under
pytest's ``tmp_path``.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``tablayeso.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any tablayeso imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def wall_engine():
    from tablayeso.services.wall_engine import WallEngine
    return WallEngine()


@pytest.fixture(scope="session")
def ceiling_engine():
    from tablayeso.services.ceiling_engine import CeilingEngine
    return CeilingEngine()


@pytest.fixture(scope="session")
def trim_engine():
    from tablayeso.services.trim_engine import TrimEngine
    return TrimEngine()


@pytest.fixture(scope="session")
def quantity_engine():
    """QuantityEngine is stateless between calls; one instance serves every test."""
    from tablayeso.services.quantity_engine import QuantityEngine
    return QuantityEngine()


# ---------------------------------------------------------------------------
# Sample items
# ---------------------------------------------------------------------------

@pytest.fixture
def simple_wall():
    """
    One-face Normal wall, 3.00 m × 2.40 m, studs at 0.40 m.

    Expected bill:
      panels   7.2 m² ≥ 1.5 → ceil(7.2 / 2.98) = 3
      studs    floor(3.0 / 0.40) + 1 = 8
      tracks   3.0 × 2 / 3.05 = 1.97 → 2
      Pasta    7.2 / 22 → 1,   Cinta de Papel 7.2 × 7 / 2.98 = 16.9 → 17
      Lija     2.416 / 2 → 2,  1" fine screws 2.416 × 40 = 96.6 → 97
      anchors  2 tracks × 8 = 16 nails and 16 loads
      ½" fine  8 studs × 4 = 32
    """
    return {
        "kind": "wall",
        "number": 1,
        "segments": [{"width": 3.0, "height": 2.4}],
        "faces": 1,
        "face1_panel_type": "Normal",
        "post_spacing": 0.40,
    }


@pytest.fixture
def simple_wall_bill():
    return {
        "Paneles de Normal": 3,
        "Postes": 8,
        "Canales": 2,
        "Pasta": 1,
        "Cinta de Papel": 17,
        "Lija Grano 120": 2,
        'Tornillos de 1" punta fina': 97,
        "Clavos con Roldana": 16,
        "Fulminantes": 16,
        'Tornillos de 1/2" punta fina': 32,
    }


@pytest.fixture
def durock_ceiling():
    """Durock ceiling, one 3.00 m × 3.00 m segment, 0.50 m plenum."""
    return {
        "kind": "ceiling",
        "number": 2,
        "segments": [{"width": 3.0, "length": 3.0}],
        "panel_type": "Durock",
        "plenum": 0.5,
        "angular_deduction": 0.0,
    }


@pytest.fixture
def horizontal_trim():
    """Normal horizontal trim box, one side, 2.00 m long, 0.30 m wide, 0.40 m tall."""
    return {
        "kind": "trim",
        "number": 3,
        "segments": [{"length": 2.0, "width": 0.3, "height": 0.4}],
        "orientation": "horizontal",
        "panel_type": "Normal",
        "sides": 1,
    }


@pytest.fixture
def report_dir(tmp_path, monkeypatch):
    """Redirect DOWNLOAD_DIR to a per-test directory."""
    from tablayeso import config
    target = tmp_path / "downloads"
    monkeypatch.setattr(config, "DOWNLOAD_DIR", str(target))
    return target
