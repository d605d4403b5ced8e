"""OS National Grid reference parsing and formatting.

A grid reference is two letters followed by an even number (0-10) of digits,
e.g. ``SN853872``. The letters locate a 100 km square; the digits split into
equal easting and northing halves giving an offset inside that square at a
resolution of ``10 ** (5 - half)`` metres.
"""

import math
import re
from typing import Optional

from .constants import (
    GRID_LETTERS,
    LETTER_INDEX,
    MAX_DIGITS,
    MAX_EASTING_SQUARES,
    MAX_NORTHING_SQUARES,
    ORIGIN_COLUMN,
    ORIGIN_ROW,
    SQUARE_SIZE,
)
from .errors import ParseError
from .models import PlaneCoordinate

_DIGITS_RE = re.compile(r"[0-9]*")

RESOLUTIONS = tuple(10 ** k for k in range(6))  # 1 m .. 100 km


def normalise(raw: str) -> str:
    """Remove all whitespace and upper-case, e.g. ' sn 853 872' -> 'SN853872'."""
    return "".join(raw.split()).upper()


def _square_indices(first: str, second: str) -> tuple[int, int]:
    """Return the (easting, northing) index of the 100 km square for two letters."""
    l1 = LETTER_INDEX[first]
    l2 = LETTER_INDEX[second]
    # 500 km square relative to 'S', then 100 km square counted from its NW corner
    e_sq = (l1 % 5 - ORIGIN_COLUMN) * 5 + l2 % 5
    n_sq = (ORIGIN_ROW - l1 // 5) * 5 + (4 - l2 // 5)
    return e_sq, n_sq


def _square_letters(e_sq: int, n_sq: int) -> str:
    """Inverse of _square_indices."""
    l1 = (ORIGIN_ROW - n_sq // 5) * 5 + (e_sq // 5 + ORIGIN_COLUMN)
    l2 = (4 - n_sq % 5) * 5 + e_sq % 5
    return GRID_LETTERS[l1] + GRID_LETTERS[l2]


def parse_grid_reference(reference: str) -> PlaneCoordinate:
    """
    Parse a grid reference into a BNG coordinate at the SW corner of its cell.

    Raises ParseError naming the reference and the violated constraint.
    """
    if not isinstance(reference, str):
        raise ParseError(repr(reference), "not a string")

    ref = normalise(reference)
    if not ref:
        raise ParseError(reference, "empty reference")
    if len(ref) < 2:
        raise ParseError(reference, "expected two grid letters")

    letters, digits = ref[:2], ref[2:]
    for letter in letters:
        if letter not in LETTER_INDEX:
            raise ParseError(reference, f"invalid grid letter '{letter}'")
    if not _DIGITS_RE.fullmatch(digits):
        raise ParseError(reference, "non-digit characters after the grid letters")
    if len(digits) > MAX_DIGITS:
        raise ParseError(reference, f"too many digits ({len(digits)} > {MAX_DIGITS})")
    if len(digits) % 2:
        raise ParseError(reference, f"odd number of digits ({len(digits)})")

    e_sq, n_sq = _square_indices(letters[0], letters[1])
    if not (0 <= e_sq < MAX_EASTING_SQUARES and 0 <= n_sq < MAX_NORTHING_SQUARES):
        raise ParseError(reference, f"square '{letters}' is outside the National Grid")

    half = len(digits) // 2
    resolution = 10 ** (5 - half)
    e_off = int(digits[:half]) * resolution if half else 0
    n_off = int(digits[half:]) * resolution if half else 0

    return PlaneCoordinate(
        easting=e_sq * SQUARE_SIZE + e_off,
        northing=n_sq * SQUARE_SIZE + n_off,
        resolution=resolution,
    )


def format_grid_reference(coord: PlaneCoordinate, resolution: Optional[int] = None) -> str:
    """
    Render a BNG coordinate as a grid reference at *resolution* metres.

    Defaults to the coordinate's own resolution. Offsets are truncated, not
    rounded, so the reference names the cell containing the point.
    """
    resolution = coord.resolution if resolution is None else resolution
    label = f"({coord.easting}, {coord.northing})"
    if resolution not in RESOLUTIONS:
        raise ParseError(label, f"resolution must be one of {RESOLUTIONS}, got {resolution}")
    if not (math.isfinite(coord.easting) and math.isfinite(coord.northing)):
        raise ParseError(label, "coordinate is not finite")

    # snap to the micrometre so float noise just under a cell corner stays in that cell
    easting = round(coord.easting, 6)
    northing = round(coord.northing, 6)

    e_sq = int(easting // SQUARE_SIZE)
    n_sq = int(northing // SQUARE_SIZE)
    if not (0 <= e_sq < MAX_EASTING_SQUARES and 0 <= n_sq < MAX_NORTHING_SQUARES):
        raise ParseError(label, "coordinate is outside the National Grid")

    letters = _square_letters(e_sq, n_sq)
    half = 5 - RESOLUTIONS.index(resolution)
    if half == 0:
        return letters

    e_off = int((easting % SQUARE_SIZE) // resolution)
    n_off = int((northing % SQUARE_SIZE) // resolution)
    return f"{letters}{e_off:0{half}d}{n_off:0{half}d}"
