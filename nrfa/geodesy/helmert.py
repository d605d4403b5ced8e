"""Seven-parameter Helmert transform between OSGB36 and WGS84.

Geographic coordinates are taken to geocentric Cartesian on the source
ellipsoid, moved with a small-angle similarity transform, and brought back
to geographic on the target ellipsoid. The reverse direction negates every
parameter, which is only an approximate inverse (a few millimetres).
"""

import logging
import math

from .constants import AIRY_1830, OSGB36_TO_WGS84, WGS84
from .errors import TransformError
from .models import Ellipsoid, GeographicCoordinate, HelmertParameters

logger = logging.getLogger(__name__)

# Cartesian -> geodetic latitude iteration
TOLERANCE = 1e-12  # radians, about 6 micrometres
MAX_ITERATIONS = 10

# Accept points within this distance of the ellipsoid surface
MAX_HEIGHT = 100000.0  # metres

WGS84_TO_OSGB36 = OSGB36_TO_WGS84.inverse()


def _check_radius(x: float, y: float, z: float, ellipsoid: Ellipsoid) -> None:
    """Raise TransformError unless (x, y, z) lies near the ellipsoid surface."""
    point = (x, y, z)
    if not all(math.isfinite(v) for v in point):
        raise TransformError(point, "coordinate is not finite")
    r = math.sqrt(x * x + y * y + z * z)
    if not (ellipsoid.b - MAX_HEIGHT <= r <= ellipsoid.a + MAX_HEIGHT):
        raise TransformError(point, f"geocentric radius {r:.1f} m is not near the {ellipsoid.name} surface")


def to_cartesian(geo: GeographicCoordinate, ellipsoid: Ellipsoid) -> tuple[float, float, float]:
    """Geographic (degrees, ellipsoidal height) to geocentric X, Y, Z in metres."""
    if not (math.isfinite(geo.lat) and math.isfinite(geo.lon) and math.isfinite(geo.height)):
        raise TransformError((geo.lat, geo.lon, geo.height), "coordinate is not finite")
    if abs(geo.lat) > 90:
        raise TransformError((geo.lat, geo.lon, geo.height), "latitude is outside [-90, 90]")

    phi = math.radians(geo.lat)
    lam = math.radians(geo.lon)
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)

    e2 = ellipsoid.e2
    nu = ellipsoid.a / math.sqrt(1 - e2 * sin_phi ** 2)
    h = geo.height

    x = (nu + h) * cos_phi * math.cos(lam)
    y = (nu + h) * cos_phi * math.sin(lam)
    z = (nu * (1 - e2) + h) * sin_phi
    return x, y, z


def to_geodetic(x: float, y: float, z: float, ellipsoid: Ellipsoid) -> GeographicCoordinate:
    """Geocentric X, Y, Z to geographic coordinates on *ellipsoid*."""
    _check_radius(x, y, z, ellipsoid)

    a, e2 = ellipsoid.a, ellipsoid.e2
    p = math.hypot(x, y)
    phi = math.atan2(z, p * (1 - e2))

    for _ in range(MAX_ITERATIONS):
        nu = a / math.sqrt(1 - e2 * math.sin(phi) ** 2)
        prev, phi = phi, math.atan2(z + e2 * nu * math.sin(phi), p)
        if abs(phi - prev) < TOLERANCE:
            break
    else:
        raise TransformError((x, y, z), f"latitude did not converge in {MAX_ITERATIONS} iterations")

    nu = a / math.sqrt(1 - e2 * math.sin(phi) ** 2)
    if abs(math.cos(phi)) > 1e-10:
        height = p / math.cos(phi) - nu
    else:
        # at the poles
        height = abs(z) - nu * (1 - e2)

    return GeographicCoordinate(
        lat=math.degrees(phi),
        lon=math.degrees(math.atan2(y, x)),
        height=height,
        datum=ellipsoid.datum,
    )


def apply(x: float, y: float, z: float, params: HelmertParameters) -> tuple[float, float, float]:
    """Apply the linearised similarity transform to a geocentric point."""
    s = params.s * 1e-6
    rx = math.radians(params.rx / 3600)
    ry = math.radians(params.ry / 3600)
    rz = math.radians(params.rz / 3600)

    x2 = params.tx + (1 + s) * x - rz * y + ry * z
    y2 = params.ty + rz * x + (1 + s) * y - rx * z
    z2 = params.tz - ry * x + rx * y + (1 + s) * z
    return x2, y2, z2


def transform(
    geo: GeographicCoordinate,
    source: Ellipsoid,
    target: Ellipsoid,
    params: HelmertParameters,
) -> GeographicCoordinate:
    """Move *geo* from the *source* datum to the *target* datum."""
    if geo.datum != source.datum:
        raise TransformError(
            (geo.lat, geo.lon, geo.height),
            f"coordinate is on {geo.datum}, expected {source.datum}",
        )
    x, y, z = to_cartesian(geo, source)
    _check_radius(x, y, z, source)
    return to_geodetic(*apply(x, y, z, params), target)


def osgb36_to_wgs84(geo: GeographicCoordinate) -> GeographicCoordinate:
    return transform(geo, AIRY_1830, WGS84, OSGB36_TO_WGS84)


def wgs84_to_osgb36(geo: GeographicCoordinate) -> GeographicCoordinate:
    return transform(geo, WGS84, AIRY_1830, WGS84_TO_OSGB36)
