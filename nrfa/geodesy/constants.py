"""Read-only constant tables for the British National Grid.

The letter table maps the 25 grid letters (``I`` is never used) onto a 5x5
arrangement, ``A`` in the NW corner and ``Z`` in the SE. The first letter of a
reference picks a 500 km square, the second a 100 km square inside it.
"""

from types import MappingProxyType

from .models import Ellipsoid, HelmertParameters, TransverseMercatorOrigin

# ── Grid letters ──────────────────────────────────────────────────

GRID_LETTERS = "ABCDEFGHJKLMNOPQRSTUVWXYZ"
LETTER_INDEX = MappingProxyType({letter: i for i, letter in enumerate(GRID_LETTERS)})

# 500 km square 'S' (index 17 -> column 2, row 3) holds the false origin
ORIGIN_COLUMN = 2
ORIGIN_ROW = 3

SQUARE_SIZE = 100000  # metres

# Mainland grid envelope, in 100 km squares
MAX_EASTING_SQUARES = 7
MAX_NORTHING_SQUARES = 13

MAX_DIGITS = 10

# ── Ellipsoids ────────────────────────────────────────────────────

AIRY_1830 = Ellipsoid(name="Airy1830", datum="OSGB36", a=6377563.396, f=1 / 299.3249646)
WGS84 = Ellipsoid(name="WGS84", datum="WGS84", a=6378137.0, f=1 / 298.257223563)

# ── National Grid projection ──────────────────────────────────────

BNG_ORIGIN = TransverseMercatorOrigin(
    lat0=49.0,
    lon0=-2.0,
    false_easting=400000.0,
    false_northing=-100000.0,
    scale_factor=0.9996012717,
)

# ── Helmert parameters: OSGB36 -> WGS84 ───────────────────────────
# translations (m), rotations (arc-seconds), scale (ppm)

OSGB36_TO_WGS84 = HelmertParameters(
    tx=446.448,
    ty=-125.157,
    tz=542.060,
    rx=0.1502,
    ry=0.2470,
    rz=0.8421,
    s=-20.4894,
)
