"""Transverse Mercator projection on an arbitrary ellipsoid.

Series expansions follow the Ordnance Survey's "A guide to coordinate
systems in Great Britain" (annex C). Defaults are the National Grid on the
Airy 1830 ellipsoid, so ``inverse(e, n)`` returns OSGB36 latitude/longitude.
"""

import logging
import math

from .constants import AIRY_1830, BNG_ORIGIN
from .errors import ProjectionError
from .models import Ellipsoid, GeographicCoordinate, TransverseMercatorOrigin

logger = logging.getLogger(__name__)

# Footpoint latitude iteration
TOLERANCE = 0.00001  # metres of meridional arc (0.01 mm)
MAX_ITERATIONS = 16


def meridional_arc(phi: float, ellipsoid: Ellipsoid, origin: TransverseMercatorOrigin) -> float:
    """Scaled meridional arc length from the true origin latitude to *phi* (radians)."""
    a, b = ellipsoid.a, ellipsoid.b
    n = (a - b) / (a + b)
    n2 = n * n
    n3 = n2 * n

    dphi = phi - origin.phi0
    sphi = phi + origin.phi0

    ma = (1 + n + (5.0 / 4.0) * n2 + (5.0 / 4.0) * n3) * dphi
    mb = (3 * n + 3 * n2 + (21.0 / 8.0) * n3) * math.sin(dphi) * math.cos(sphi)
    mc = ((15.0 / 8.0) * n2 + (15.0 / 8.0) * n3) * math.sin(2 * dphi) * math.cos(2 * sphi)
    md = (35.0 / 24.0) * n3 * math.sin(3 * dphi) * math.cos(3 * sphi)

    return b * origin.scale_factor * (ma - mb + mc - md)


def _radii(phi: float, ellipsoid: Ellipsoid, f0: float) -> tuple[float, float, float]:
    """Return (nu, rho, eta2): transverse and meridional radii of curvature, scaled."""
    a, e2 = ellipsoid.a, ellipsoid.e2
    sin2 = math.sin(phi) ** 2
    nu = a * f0 / math.sqrt(1 - e2 * sin2)
    rho = a * f0 * (1 - e2) / (1 - e2 * sin2) ** 1.5
    return nu, rho, nu / rho - 1


def forward(
    lat: float,
    lon: float,
    ellipsoid: Ellipsoid = AIRY_1830,
    origin: TransverseMercatorOrigin = BNG_ORIGIN,
) -> tuple[float, float]:
    """Project latitude/longitude (degrees) to (easting, northing) in metres."""
    phi = math.radians(lat)
    lam = math.radians(lon)

    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan2 = math.tan(phi) ** 2

    nu, rho, eta2 = _radii(phi, ellipsoid, origin.scale_factor)
    m = meridional_arc(phi, ellipsoid, origin)

    I = m + origin.false_northing
    II = nu / 2 * sin_phi * cos_phi
    III = nu / 24 * sin_phi * cos_phi ** 3 * (5 - tan2 + 9 * eta2)
    IIIA = nu / 720 * sin_phi * cos_phi ** 5 * (61 - 58 * tan2 + tan2 ** 2)
    IV = nu * cos_phi
    V = nu / 6 * cos_phi ** 3 * (nu / rho - tan2)
    VI = nu / 120 * cos_phi ** 5 * (5 - 18 * tan2 + tan2 ** 2 + 14 * eta2 - 58 * tan2 * eta2)

    dl = lam - origin.lambda0

    northing = I + II * dl ** 2 + III * dl ** 4 + IIIA * dl ** 6
    easting = origin.false_easting + IV * dl + V * dl ** 3 + VI * dl ** 5
    return easting, northing


def footpoint_latitude(
    northing: float,
    ellipsoid: Ellipsoid = AIRY_1830,
    origin: TransverseMercatorOrigin = BNG_ORIGIN,
) -> float:
    """
    Solve for the latitude (radians) whose meridional arc matches *northing*.

    Raises ProjectionError if the estimate leaves the valid latitude range or
    the residual is still above TOLERANCE after MAX_ITERATIONS passes.
    """
    a_f0 = ellipsoid.a * origin.scale_factor
    target = northing - origin.false_northing

    phi = origin.phi0
    m = 0.0
    for iteration in range(1, MAX_ITERATIONS + 1):
        phi = (target - m) / a_f0 + phi
        if not math.isfinite(phi) or abs(phi) > math.pi / 2:
            raise ProjectionError(
                math.nan, northing, "footpoint latitude beyond the pole"
            )
        m = meridional_arc(phi, ellipsoid, origin)
        if abs(target - m) < TOLERANCE:
            logger.debug("Footpoint latitude converged in %d iterations", iteration)
            return phi

    raise ProjectionError(
        math.nan,
        northing,
        f"footpoint latitude did not converge in {MAX_ITERATIONS} iterations",
    )


def inverse(
    easting: float,
    northing: float,
    ellipsoid: Ellipsoid = AIRY_1830,
    origin: TransverseMercatorOrigin = BNG_ORIGIN,
) -> GeographicCoordinate:
    """Unproject (easting, northing) to latitude/longitude on *ellipsoid*'s datum.

    Args:
        easting: grid easting in metres
        northing: grid northing in metres
        ellipsoid: ellipsoid the grid is defined on
        origin: projection origin and scale factor

    Returns:
        GeographicCoordinate in decimal degrees, height 0, tagged with the
        ellipsoid's datum.
    """
    if not (math.isfinite(easting) and math.isfinite(northing)):
        raise ProjectionError(easting, northing, "coordinate is not finite")

    try:
        phi = footpoint_latitude(northing, ellipsoid, origin)
    except ProjectionError as exc:
        raise ProjectionError(easting, northing, exc.reason) from exc

    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)
    tan2 = tan_phi ** 2

    nu, rho, eta2 = _radii(phi, ellipsoid, origin.scale_factor)

    VII = tan_phi / (2 * rho * nu)
    VIII = tan_phi / (24 * rho * nu ** 3) * (5 + 3 * tan2 + eta2 - 9 * tan2 * eta2)
    IX = tan_phi / (720 * rho * nu ** 5) * (61 + 90 * tan2 + 45 * tan2 ** 2)
    X = 1 / (cos_phi * nu)
    XI = 1 / (6 * cos_phi * nu ** 3) * (nu / rho + 2 * tan2)
    XII = 1 / (120 * cos_phi * nu ** 5) * (5 + 28 * tan2 + 24 * tan2 ** 2)
    XIIA = 1 / (5040 * cos_phi * nu ** 7) * (61 + 662 * tan2 + 1320 * tan2 ** 2 + 720 * tan2 ** 3)

    de = easting - origin.false_easting

    try:
        lat = math.degrees(phi - VII * de ** 2 + VIII * de ** 4 - IX * de ** 6)
        lon = math.degrees(origin.lambda0 + X * de - XI * de ** 3 + XII * de ** 5 - XIIA * de ** 7)
    except OverflowError as exc:
        raise ProjectionError(easting, northing, "easting is too far from the central meridian") from exc

    if not (math.isfinite(lat) and math.isfinite(lon)) or abs(lat) > 90:
        raise ProjectionError(easting, northing, "result is outside the valid latitude range")

    return GeographicCoordinate(lat=lat, lon=lon, height=0.0, datum=ellipsoid.datum)
